"""
WhatsDish Upstream Client

Production implementation of BaseUpstreamClient on top of a shared
httpx.AsyncClient. One attempt per call; the timeout comes from the
resolved GatewayConfig.

Version: 1.0.0
"""

import logging
from typing import Any, Optional

import httpx

from whatsdish_gateway.core.config import GatewayConfig
from whatsdish_gateway.core.exceptions import UpstreamUnavailable
from whatsdish_gateway.core.security import mask_token
from whatsdish_gateway.services.upstream.base import BaseUpstreamClient, UpstreamResult

logger = logging.getLogger(__name__)


class WhatsDishClient(BaseUpstreamClient):
    """
    Authenticated request primitive for the WhatsDish API.

    Example:
        >>> client = WhatsDishClient(config, http)
        >>> result = await client.call("/api/rn/merchants/42", "GET", token="abc")
        >>> result.status_code, result.ok
        (200, True)
    """

    def __init__(self, config: GatewayConfig, http: httpx.AsyncClient):
        self._base_url = config.whats_dish_base_url
        self._timeout = config.upstream_timeout_seconds
        self._http = http

    @property
    def provider_name(self) -> str:
        return "whatsdish"

    def build_url(self, path: str) -> str:
        """Join a provider path onto the configured base URL."""
        return f"{self._base_url}/{path.lstrip('/')}"

    async def call(
        self,
        path: str,
        method: str = "GET",
        token: Optional[str] = None,
        body: Any = None,
    ) -> UpstreamResult:
        url = self.build_url(path)
        method = method.upper()

        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        request_kwargs: dict[str, Any] = {"headers": headers, "timeout": self._timeout}
        if body is not None:
            # httpx sets Content-Type: application/json for json=
            request_kwargs["json"] = body

        logger.debug(f"WhatsDish: {method} {url} (token: {mask_token(token)})")

        try:
            response = await self._http.request(method, url, **request_kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"WhatsDish: Timeout on {method} {path} - {e!r}")
            raise UpstreamUnavailable("Upstream request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"WhatsDish: Transport error on {method} {path} - {e!r}")
            raise UpstreamUnavailable("Unable to reach upstream service") from e

        result = self._classify(response)

        if result.ok:
            logger.debug(f"WhatsDish: {method} {path} -> {result.status_code}")
        else:
            logger.warning(
                f"WhatsDish: {method} {path} -> {result.status_code}"
                f"{'' if result.parsed else ' (unparseable body)'}"
            )

        return result

    @staticmethod
    def _classify(response: httpx.Response) -> UpstreamResult:
        """Parse the body as JSON and pair it with the status."""
        if not response.content:
            return UpstreamResult(status_code=response.status_code, body=None)

        try:
            body = response.json()
        except ValueError:
            return UpstreamResult(status_code=response.status_code, body=None, parsed=False)

        return UpstreamResult(status_code=response.status_code, body=body)
