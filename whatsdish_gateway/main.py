"""
FastAPI Application Entry Point

WhatsDish Gateway - phone login and authenticated proxy in front of the
WhatsDish provider and the Supabase menu store.

Endpoints:
    - GET  /menu, /restaurant: Supabase reads
    - POST /api/send-code, /api/verify-code: OTP login
    - /api/...: WhatsDish passthrough (see routes.PROXY_ROUTES)
    - GET  /health: Liveness check

Run:
    whatsdish-gateway            # validates env, then starts uvicorn
    uvicorn whatsdish_gateway.main:app

Version: 1.0.0
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from whatsdish_gateway.core.config import Settings, get_settings, setup_logging
from whatsdish_gateway.core.exceptions import ConfigurationError, GatewayError, UpstreamError
from whatsdish_gateway.routes import router
from whatsdish_gateway.schemas import HealthResponse
from whatsdish_gateway.services import build_services

logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

def _build_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Resolve upstream configuration and open the shared HTTP client.

        A ConfigurationError here aborts server startup before any request
        is accepted.
        """
        logger.info("=" * 60)
        logger.info(f"🚀 Starting {settings.app_name}")
        logger.info(f"   Version: {settings.app_version}")
        logger.info(f"   Environment: {settings.node_env.value}")
        logger.info("=" * 60)

        config = settings.resolve_gateway_config()

        if config.is_development:
            logger.debug("Full API configuration:")
            logger.debug(f"- SUPABASE_URL: {config.supabase_url}")
            logger.debug(f"- WHATS_DISH_BASE_URL: {config.whats_dish_base_url}")

        async with httpx.AsyncClient(timeout=config.upstream_timeout_seconds) as http:
            app.state.services = build_services(config, http)
            logger.info(f"✅ Upstream: {app.state.services.upstream.provider_name}")
            logger.info(f"✅ Store: {app.state.services.datastore.provider_name}")
            logger.info("✅ Application ready!")

            yield  # Application runs

            logger.info("Shutting down...")

        logger.info("✅ Cleanup complete")

    return lifespan


# =============================================================================
# ERROR HANDLERS
# =============================================================================

def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure to a JSON body."""

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError) -> Response:
        logger.warning(f"{request.method} {request.url.path} - upstream {exc.status_code}")
        if exc.body is None:
            return Response(status_code=exc.status_code)
        return JSONResponse(status_code=exc.status_code, content=exc.body)

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(f"{request.method} {request.url.path} - {exc.status_code} {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path} - invalid body: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all exception handler."""
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the gateway application.

    Args:
        settings: Settings to use (defaults to the cached get_settings())
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Phone login and authenticated proxy for the WhatsDish API "
            "and the Supabase menu store."
        ),
        version=settings.app_version,
        lifespan=_build_lifespan(settings),
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, str]:
        """API root with navigation links."""
        return {
            "message": f"🍜 Welcome to {settings.app_name}",
            "version": settings.app_version,
            "environment": settings.node_env.value,
            "documentation": "/docs",
            "health": "/health",
        }

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Liveness check; does not call upstream services."""
        return HealthResponse(
            status="operational",
            environment=settings.node_env.value,
            version=settings.app_version,
            timestamp=datetime.now(),
        )

    app.include_router(router)

    return app


app = create_app()


def run() -> None:
    """
    Console entry point.

    Missing upstream configuration is fatal: report it and exit with
    status 1 before uvicorn binds a socket.
    """
    settings = get_settings()
    setup_logging(settings)

    try:
        settings.resolve_gateway_config()
    except ConfigurationError as e:
        logger.critical("ERROR: Missing required environment variables!")
        for name in e.missing:
            logger.critical(f"- {name} is missing")
        sys.exit(1)

    uvicorn.run(
        "whatsdish_gateway.main:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    run()
