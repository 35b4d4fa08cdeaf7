"""
Gateway Routes

Endpoints:
    - GET  /menu?restaurant_id=        Supabase menu items (+ modifiers/options)
    - GET  /restaurant                 Supabase restaurants
    - POST /api/send-code              OTP step 1
    - POST /api/verify-code            OTP step 2
    - everything in PROXY_ROUTES       WhatsDish passthrough

Proxied routes are declared as ProxyRoute entries and share one generic
operation: extract token, resolve the upstream path, forward, relay the
provider's status and body unchanged.

Version: 1.0.0
"""

import inspect
import json
import logging
import string
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

from fastapi import APIRouter, Body, Depends, Path, Query, Request
from fastapi.responses import JSONResponse, Response

from whatsdish_gateway.core.exceptions import (
    DataStoreError,
    InvalidRequest,
    UpstreamError,
    UpstreamUnavailable,
)
from whatsdish_gateway.core.security import mask_token, optional_bearer_token, require_bearer_token
from whatsdish_gateway.schemas import (
    ErrorResponse,
    LoginResponse,
    MessageResponse,
    SendCodeRequest,
    VerifyCodeRequest,
)
from whatsdish_gateway.services import GatewayServices
from whatsdish_gateway.services.datastore import BaseDataStore
from whatsdish_gateway.services.otp import OtpFlowController
from whatsdish_gateway.services.upstream import BaseUpstreamClient, UpstreamResult

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_services(request: Request) -> GatewayServices:
    return request.app.state.services


def get_upstream_client(services: GatewayServices = Depends(get_services)) -> BaseUpstreamClient:
    return services.upstream


def get_data_store(services: GatewayServices = Depends(get_services)) -> BaseDataStore:
    return services.datastore


def get_otp_controller(services: GatewayServices = Depends(get_services)) -> OtpFlowController:
    return services.otp


# =============================================================================
# PROXY ROUTE TABLE
# =============================================================================

@dataclass(frozen=True)
class ProxyRoute:
    """
    One gateway endpoint forwarded to WhatsDish.

    Attributes:
        name: Route name (also used in logs)
        method: HTTP method, shared by gateway and upstream
        path: Gateway path template (FastAPI syntax)
        upstream_path: Provider path template; fields come from path
            parameters and query_params
        requires_auth: Reject with 401 when no bearer token is sent
        forwards_body: Forward the JSON request body upstream
        query_params: (query name, template field) pairs, all required
        body_required_message: Error returned when a forwarded body is missing
        summary: OpenAPI summary
    """
    name: str
    method: str
    path: str
    upstream_path: str
    requires_auth: bool = True
    forwards_body: bool = False
    query_params: tuple[tuple[str, str], ...] = ()
    body_required_message: str = "Request body is required"
    summary: str = ""

    @property
    def template_fields(self) -> set[str]:
        return {
            field
            for _, field, _, _ in string.Formatter().parse(self.upstream_path)
            if field
        }

    @property
    def path_fields(self) -> list[str]:
        """Path parameter names of the gateway path, in order."""
        return [field for _, field, _, _ in string.Formatter().parse(self.path) if field]


PROXY_ROUTES: tuple[ProxyRoute, ...] = (
    ProxyRoute(
        name="list_restaurants",
        method="GET",
        path="/api/restaurants",
        upstream_path="/api/rn/merchants",
        requires_auth=False,
        summary="List merchants",
    ),
    ProxyRoute(
        name="get_restaurant",
        method="GET",
        path="/api/restaurants/{restaurantId}",
        upstream_path="/api/rn/merchants/{restaurantId}",
        summary="Merchant detail",
    ),
    ProxyRoute(
        name="fetch_menu",
        method="GET",
        path="/fetch-menu",
        upstream_path="/api/rn/merchants/{restaurantId}",
        query_params=(("restaurantId", "restaurantId"),),
        summary="Merchant detail by query parameter",
    ),
    ProxyRoute(
        name="get_profile",
        method="GET",
        path="/api/user/profile",
        upstream_path="/api/rn/profile",
        summary="User profile",
    ),
    ProxyRoute(
        name="list_payment_methods",
        method="GET",
        path="/api/profile/payment-methods",
        upstream_path="/api/profile/payment-methods",
        summary="List saved cards",
    ),
    ProxyRoute(
        name="add_payment_method",
        method="POST",
        path="/api/payments/m/cof",
        upstream_path="/api/payments/m/cof",
        forwards_body=True,
        body_required_message="Card information is required",
        summary="Save a card on file",
    ),
    ProxyRoute(
        name="delete_payment_method",
        method="DELETE",
        path="/api/profile/payment-methods/{cardId}",
        upstream_path="/api/profile/payment-methods/{cardId}",
        summary="Remove a saved card",
    ),
)


async def _read_json_body(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError:
        raise InvalidRequest("Invalid request body")


def resolve_upstream_path(route: ProxyRoute, request: Request) -> str:
    """Fill the route's upstream template from path and query parameters."""
    values = {k: v for k, v in request.path_params.items() if k in route.template_fields}

    for query_name, field in route.query_params:
        value = request.query_params.get(query_name)
        if not value:
            raise InvalidRequest(f"Missing {query_name} parameter")
        values[field] = value

    return route.upstream_path.format(
        **{k: quote(str(v), safe="") for k, v in values.items()}
    )


def relay(result: UpstreamResult) -> Response:
    """Turn a provider result into the client response, status and body together."""
    if not result.parsed:
        status = result.status_code if result.status_code >= 400 else 500
        raise UpstreamUnavailable("Upstream returned an invalid response", status_code=status)

    if not result.ok:
        raise UpstreamError(result.status_code, result.body)

    if result.status_code == 204:
        return Response(status_code=204)

    return JSONResponse(status_code=result.status_code, content=result.body)


async def proxy(
    route: ProxyRoute,
    request: Request,
    token: Optional[str],
    upstream: BaseUpstreamClient,
) -> Response:
    """The one proxy operation shared by every PROXY_ROUTES entry."""
    path = resolve_upstream_path(route, request)

    body = None
    if route.forwards_body:
        body = await _read_json_body(request)
        if body is None:
            raise InvalidRequest(route.body_required_message)

    logger.debug(f"{route.name}: {route.method} {path} (token: {mask_token(token)})")

    result = await upstream.call(path, route.method, token=token, body=body)

    if result.ok:
        logger.debug(f"{route.name}: fetched successfully")
    else:
        logger.error(f"{route.name}: upstream responded {result.status_code}")

    return relay(result)


def _make_endpoint(route: ProxyRoute):
    token_dependency = require_bearer_token if route.requires_auth else optional_bearer_token

    async def endpoint(
        request: Request,
        token: Optional[str] = Depends(token_dependency),
        upstream: BaseUpstreamClient = Depends(get_upstream_client),
        **declared: Any,
    ) -> Response:
        return await proxy(route, request, token, upstream)

    # Path and query parameters are read from the request; declaring them
    # only puts them in the OpenAPI schema.
    declared = [
        inspect.Parameter(name, inspect.Parameter.KEYWORD_ONLY, default=Path(), annotation=str)
        for name in route.path_fields
    ] + [
        inspect.Parameter(
            name, inspect.Parameter.KEYWORD_ONLY, default=Query(None), annotation=Optional[str]
        )
        for name, _ in route.query_params
    ]
    signature = inspect.signature(endpoint)
    fixed = [
        p for p in signature.parameters.values() if p.kind is not inspect.Parameter.VAR_KEYWORD
    ]
    endpoint.__signature__ = signature.replace(parameters=fixed + declared)
    endpoint.__name__ = route.name
    return endpoint


def register_proxy_routes(target: APIRouter, routes: tuple[ProxyRoute, ...] = PROXY_ROUTES) -> None:
    """Add one endpoint per ProxyRoute to the router."""
    for route in routes:
        target.add_api_route(
            route.path,
            _make_endpoint(route),
            methods=[route.method],
            name=route.name,
            summary=route.summary or None,
            responses=ERROR_RESPONSES,
            tags=["WhatsDish"],
        )


# =============================================================================
# DATA STORE ENDPOINTS
# =============================================================================

@router.get(
    "/menu",
    responses=ERROR_RESPONSES,
    tags=["Store"],
    summary="Menu for a restaurant",
)
async def get_menu(
    restaurant_id: Optional[str] = Query(None),
    store: BaseDataStore = Depends(get_data_store),
) -> list[dict[str, Any]]:
    """Menu items with nested modifier groups and option groups."""
    if not restaurant_id:
        raise InvalidRequest("Missing restaurant_id parameter")

    logger.info(f"Fetching menu for restaurant_id: {restaurant_id}")

    result = await store.fetch_menu(restaurant_id)
    if not result.success:
        raise DataStoreError(result.error)

    logger.debug(f"Menu Data fetched successfully for restaurant_id: {restaurant_id}")
    return result.rows


@router.get(
    "/restaurant",
    responses=ERROR_RESPONSES,
    tags=["Store"],
    summary="All restaurants",
)
async def get_restaurants(
    store: BaseDataStore = Depends(get_data_store),
) -> list[dict[str, Any]]:
    """Every row of the restaurants table."""
    logger.info("Fetching all restaurants")

    result = await store.fetch_restaurants()
    if not result.success:
        raise DataStoreError(result.error)

    logger.debug("Restaurant Data fetched successfully")
    return result.rows


# =============================================================================
# OTP LOGIN ENDPOINTS
# =============================================================================

@router.post(
    "/api/send-code",
    response_model=MessageResponse,
    responses=ERROR_RESPONSES,
    tags=["Auth"],
    summary="Send a login code by SMS",
)
async def send_code(
    payload: Optional[SendCodeRequest] = Body(None),
    otp: OtpFlowController = Depends(get_otp_controller),
) -> MessageResponse:
    phone = payload.resolved_phone if payload else None
    return MessageResponse(**await otp.send_code(phone))


@router.post(
    "/api/verify-code",
    response_model=LoginResponse,
    responses=ERROR_RESPONSES,
    tags=["Auth"],
    summary="Verify a login code",
)
async def verify_code(
    request: Request,
    payload: Optional[VerifyCodeRequest] = Body(None),
    otp: OtpFlowController = Depends(get_otp_controller),
) -> LoginResponse:
    """
    Exchange phone + code for a WhatsDish token.

    The client IP sent upstream comes from the lookup service, falling back
    to this connection's address, then to loopback.
    """
    connection_ip = request.client.host if request.client else None
    result = await otp.verify_code(
        payload.resolved_phone if payload else None,
        payload.resolved_code if payload else None,
        connection_ip=connection_ip,
    )
    return LoginResponse(**result)


register_proxy_routes(router)
