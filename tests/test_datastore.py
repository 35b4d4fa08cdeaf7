"""Tests for the Supabase store reader."""

import httpx
import pytest
from respx import MockRouter

from tests.conftest import SUPABASE_ANON_KEY, SUPABASE_URL
from whatsdish_gateway.services.datastore import MENU_SELECT, SupabaseDataStore


@pytest.fixture
def store(gateway_config, http) -> SupabaseDataStore:
    return SupabaseDataStore(gateway_config, http)


async def test_fetch_menu_filters_by_restaurant(store: SupabaseDataStore, respx_mock: MockRouter):
    rows = [{"id": 1, "name": "Dumplings", "modifier_groups": [], "option_groups": []}]
    route = respx_mock.get(f"{SUPABASE_URL}/rest/v1/menu_items").mock(
        return_value=httpx.Response(200, json=rows)
    )

    result = await store.fetch_menu("7")

    assert result.success
    assert result.rows == rows
    request = route.calls.last.request
    assert request.url.params["restaurant_id"] == "eq.7"
    assert request.url.params["select"] == MENU_SELECT
    assert request.headers["apikey"] == SUPABASE_ANON_KEY
    assert request.headers["Authorization"] == f"Bearer {SUPABASE_ANON_KEY}"


async def test_fetch_restaurants_selects_everything(
    store: SupabaseDataStore, respx_mock: MockRouter
):
    route = respx_mock.get(f"{SUPABASE_URL}/rest/v1/restaurants").mock(
        return_value=httpx.Response(200, json=[{"id": 1}, {"id": 2}])
    )

    result = await store.fetch_restaurants()

    assert result.rows == [{"id": 1}, {"id": 2}]
    assert dict(route.calls.last.request.url.params) == {"select": "*"}


async def test_store_error_message_is_reported(store: SupabaseDataStore, respx_mock: MockRouter):
    respx_mock.get(f"{SUPABASE_URL}/rest/v1/restaurants").mock(
        return_value=httpx.Response(
            400,
            json={"code": "42P01", "message": 'relation "restaurants" does not exist'},
        )
    )

    result = await store.fetch_restaurants()

    assert not result.success
    assert result.rows is None
    assert result.error == 'relation "restaurants" does not exist'


async def test_transport_error_is_reported(store: SupabaseDataStore, respx_mock: MockRouter):
    respx_mock.get(f"{SUPABASE_URL}/rest/v1/restaurants").mock(
        side_effect=httpx.ConnectError("refused")
    )

    result = await store.fetch_restaurants()

    assert not result.success
    assert "Unable to reach data store" in result.error


async def test_non_list_payload_is_an_error(store: SupabaseDataStore, respx_mock: MockRouter):
    respx_mock.get(f"{SUPABASE_URL}/rest/v1/restaurants").mock(
        return_value=httpx.Response(200, json={"unexpected": True})
    )

    result = await store.fetch_restaurants()

    assert result.error == "Data store returned an invalid response"
