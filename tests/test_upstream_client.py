"""Tests for the WhatsDish request primitive."""

import json

import httpx
import pytest
from respx import MockRouter

from tests.conftest import TOKEN, WHATS_DISH_URL
from whatsdish_gateway.core.exceptions import UpstreamUnavailable
from whatsdish_gateway.services.upstream import UpstreamResult, WhatsDishClient


@pytest.fixture
def upstream(gateway_config, http) -> WhatsDishClient:
    return WhatsDishClient(gateway_config, http)


async def test_get_forwards_bearer_token(upstream: WhatsDishClient, respx_mock: MockRouter):
    route = respx_mock.get(f"{WHATS_DISH_URL}/api/rn/profile").mock(
        return_value=httpx.Response(200, json={"name": "Ada"})
    )

    result = await upstream.call("/api/rn/profile", "GET", token=TOKEN)

    assert result == UpstreamResult(status_code=200, body={"name": "Ada"})
    assert result.ok
    request = route.calls.last.request
    assert request.headers["Authorization"] == f"Bearer {TOKEN}"
    assert request.content == b""


async def test_no_authorization_header_without_token(
    upstream: WhatsDishClient, respx_mock: MockRouter
):
    route = respx_mock.get(f"{WHATS_DISH_URL}/api/rn/merchants").mock(
        return_value=httpx.Response(200, json=[])
    )

    await upstream.call("api/rn/merchants")

    assert "Authorization" not in route.calls.last.request.headers


async def test_post_serializes_json_body(upstream: WhatsDishClient, respx_mock: MockRouter):
    route = respx_mock.post(f"{WHATS_DISH_URL}/api/payments/m/cof").mock(
        return_value=httpx.Response(201, json={"id": "card_1"})
    )

    result = await upstream.call(
        "/api/payments/m/cof", "post", token=TOKEN, body={"number": "4242", "exp": "12/30"}
    )

    assert result.ok
    assert result.status_code == 201
    request = route.calls.last.request
    assert request.method == "POST"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == {"number": "4242", "exp": "12/30"}


async def test_non_2xx_carries_status_and_body(upstream: WhatsDishClient, respx_mock: MockRouter):
    respx_mock.get(f"{WHATS_DISH_URL}/api/rn/merchants/42").mock(
        return_value=httpx.Response(404, json={"error": "not found"})
    )

    result = await upstream.call("/api/rn/merchants/42", token=TOKEN)

    assert not result.ok
    assert result.parsed
    assert result.status_code == 404
    assert result.body == {"error": "not found"}


async def test_unparseable_body_is_not_ok(upstream: WhatsDishClient, respx_mock: MockRouter):
    respx_mock.get(f"{WHATS_DISH_URL}/api/rn/profile").mock(
        return_value=httpx.Response(200, text="<html>maintenance</html>")
    )

    result = await upstream.call("/api/rn/profile", token=TOKEN)

    assert not result.ok
    assert not result.parsed
    assert result.status_code == 200
    assert result.body is None


async def test_empty_body_is_parsed_as_none(upstream: WhatsDishClient, respx_mock: MockRouter):
    respx_mock.delete(f"{WHATS_DISH_URL}/api/profile/payment-methods/c1").mock(
        return_value=httpx.Response(204)
    )

    result = await upstream.call("/api/profile/payment-methods/c1", "DELETE", token=TOKEN)

    assert result.ok
    assert result.body is None


async def test_timeout_raises_upstream_unavailable(
    upstream: WhatsDishClient, respx_mock: MockRouter
):
    respx_mock.get(f"{WHATS_DISH_URL}/api/rn/profile").mock(
        side_effect=httpx.ReadTimeout("timed out")
    )

    with pytest.raises(UpstreamUnavailable) as exc_info:
        await upstream.call("/api/rn/profile", token=TOKEN)

    assert exc_info.value.status_code == 500


async def test_connect_error_raises_upstream_unavailable(
    upstream: WhatsDishClient, respx_mock: MockRouter
):
    respx_mock.get(f"{WHATS_DISH_URL}/api/rn/profile").mock(
        side_effect=httpx.ConnectError("refused")
    )

    with pytest.raises(UpstreamUnavailable):
        await upstream.call("/api/rn/profile", token=TOKEN)


async def test_build_url_joins_without_double_slash(upstream: WhatsDishClient):
    assert upstream.build_url("/api/rn/profile") == f"{WHATS_DISH_URL}/api/rn/profile"
    assert upstream.build_url("api/rn/profile") == f"{WHATS_DISH_URL}/api/rn/profile"
