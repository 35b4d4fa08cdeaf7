"""
Supabase Data Store Implementation

Queries the Supabase project's PostgREST endpoint directly over httpx,
authenticated with the project's anon key.

API Documentation:
    https://postgrest.org/en/stable/references/api/tables_views.html

Version: 1.0.0
"""

import logging
from typing import Optional

import httpx

from whatsdish_gateway.core.config import GatewayConfig
from whatsdish_gateway.services.datastore.base import BaseDataStore, QueryResult

logger = logging.getLogger(__name__)


class SupabaseDataStore(BaseDataStore):
    """
    Read-only PostgREST client.

    Example:
        >>> store = SupabaseDataStore(config, http)
        >>> result = await store.fetch_restaurants()
        >>> result.rows
        [{'id': 1, 'name': 'Golden Dragon'}]
    """

    def __init__(self, config: GatewayConfig, http: httpx.AsyncClient):
        self._rest_url = f"{config.supabase_url}/rest/v1"
        self._anon_key = config.supabase_anon_key
        self._timeout = config.upstream_timeout_seconds
        self._http = http

    @property
    def provider_name(self) -> str:
        return "supabase"

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {self._anon_key}",
            "Accept": "application/json",
        }

    async def fetch(
        self,
        table: str,
        select: str = "*",
        filters: Optional[dict[str, str]] = None,
    ) -> QueryResult:
        params = {"select": select}
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"

        logger.debug(f"Supabase: Querying {table} with {params}")

        try:
            response = await self._http.get(
                f"{self._rest_url}/{table}",
                params=params,
                headers=self._headers,
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            logger.error(f"Supabase: Transport error on {table} - {e!r}")
            return QueryResult(error=f"Unable to reach data store: {e.__class__.__name__}")

        try:
            payload = response.json()
        except ValueError:
            logger.error(f"Supabase: Unparseable response from {table} ({response.status_code})")
            return QueryResult(error="Data store returned an invalid response")

        if response.is_error:
            message = payload.get("message") if isinstance(payload, dict) else None
            logger.error(f"Supabase Error: {message or response.status_code}")
            return QueryResult(error=message or f"Data store query failed ({response.status_code})")

        if not isinstance(payload, list):
            return QueryResult(error="Data store returned an invalid response")

        logger.debug(f"Supabase: {len(payload)} rows from {table}")
        return QueryResult(rows=payload)
