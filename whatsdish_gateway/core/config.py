"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports two modes, selected by NODE_ENV:
    - DEVELOPMENT: Uses the DEV_* Supabase project and WhatsDish base URL
    - PRODUCTION: Uses the PROD_* values (default when NODE_ENV is unset)

The selected values are resolved exactly once into an immutable GatewayConfig
which is handed to every collaborator. Request handlers never read the live
environment.

Usage:
    from whatsdish_gateway.core.config import get_settings

    settings = get_settings()
    config = settings.resolve_gateway_config()  # raises ConfigurationError

Version: 1.0.0
"""

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from whatsdish_gateway.core.exceptions import ConfigurationError


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: DEV_* upstream values, verbose logging
        PRODUCTION: PROD_* upstream values
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"


@dataclass(frozen=True)
class GatewayConfig:
    """
    Upstream endpoints and credentials for the active environment.

    Built once at startup by Settings.resolve_gateway_config() and shared
    read-only by every request.
    """
    environment: EnvironmentMode
    whats_dish_base_url: str
    supabase_url: str
    supabase_anon_key: str
    upstream_timeout_seconds: float = 10.0
    ip_lookup_url: str = "https://checkip.amazonaws.com/"
    ip_lookup_timeout_seconds: float = 3.0
    verify_language: str = "en"

    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentMode.DEVELOPMENT


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    The Supabase anon key is sensitive and should NEVER be committed.

    Attributes:
        node_env: Current environment (development/production)
        debug: Force verbose logging regardless of environment

        # Server
        host: Host to bind the API server
        port: Port for the API server

        # Upstream pairs (one of each is selected by node_env)
        dev_supabase_url / prod_supabase_url
        dev_supabase_anon_key / prod_supabase_anon_key
        dev_whats_dish_base_url / prod_whats_dish_base_url

        # Outbound calls
        upstream_timeout_seconds: Bound on every WhatsDish/Supabase call
        ip_lookup_url: Public IP lookup used during code verification
        ip_lookup_timeout_seconds: Bound on the IP lookup call
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    node_env: EnvironmentMode = Field(
        default=EnvironmentMode.PRODUCTION,
        description="Application environment mode (NODE_ENV)"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug logging outside development"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="WhatsDish Gateway",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    port: int = Field(
        default=5000,
        description="API server port"
    )
    cors_allow_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    # ==========================================================================
    # SUPABASE (MANAGED STORE)
    # ==========================================================================

    dev_supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL used in development"
    )
    prod_supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL used in production"
    )
    dev_supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anon key used in development"
    )
    prod_supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anon key used in production"
    )

    # ==========================================================================
    # WHATSDISH (UPSTREAM PROVIDER)
    # ==========================================================================

    dev_whats_dish_base_url: Optional[str] = Field(
        default=None,
        description="WhatsDish API base URL used in development"
    )
    prod_whats_dish_base_url: Optional[str] = Field(
        default=None,
        description="WhatsDish API base URL used in production"
    )

    # ==========================================================================
    # OUTBOUND CALLS
    # ==========================================================================

    upstream_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for WhatsDish and Supabase calls"
    )
    ip_lookup_url: str = Field(
        default="https://checkip.amazonaws.com/",
        description="Plain-text public IP lookup service"
    )
    ip_lookup_timeout_seconds: float = Field(
        default=3.0,
        gt=0,
        description="Timeout for the IP lookup call"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("node_env", mode="before")
    @classmethod
    def validate_node_env(cls, v) -> EnvironmentMode:
        """Anything other than 'development' runs as production."""
        if isinstance(v, EnvironmentMode):
            return v
        if v is not None and str(v).strip().lower() == EnvironmentMode.DEVELOPMENT.value:
            return EnvironmentMode.DEVELOPMENT
        return EnvironmentMode.PRODUCTION

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.node_env == EnvironmentMode.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.node_env == EnvironmentMode.PRODUCTION

    @property
    def env_prefix(self) -> str:
        """Prefix of the variable pair selected by node_env."""
        return "DEV" if self.is_development else "PROD"

    @property
    def cors_allow_origins_list(self) -> list[str]:
        """Get allowed CORS origins as a list."""
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]

    # ==========================================================================
    # RESOLUTION
    # ==========================================================================

    def _selected(self, name: str) -> Optional[str]:
        value = getattr(self, f"{self.env_prefix.lower()}_{name}")
        if value is None or not value.strip():
            return None
        return value.strip()

    def validate_upstream_config(self) -> list[str]:
        """
        Validate that the selected environment is fully configured.

        Returns:
            List of missing environment variable names (empty if all present)
        """
        missing = []

        for name in ("supabase_url", "supabase_anon_key", "whats_dish_base_url"):
            if self._selected(name) is None:
                missing.append(f"{self.env_prefix}_{name.upper()}")

        return missing

    def resolve_gateway_config(self) -> GatewayConfig:
        """
        Build the immutable GatewayConfig for the selected environment.

        Raises:
            ConfigurationError: If any required variable is missing
        """
        missing = self.validate_upstream_config()
        if missing:
            raise ConfigurationError(missing)

        return GatewayConfig(
            environment=self.node_env,
            whats_dish_base_url=self._selected("whats_dish_base_url").rstrip("/"),
            supabase_url=self._selected("supabase_url").rstrip("/"),
            supabase_anon_key=self._selected("supabase_anon_key"),
            upstream_timeout_seconds=self.upstream_timeout_seconds,
            ip_lookup_url=self.ip_lookup_url,
            ip_lookup_timeout_seconds=self.ip_lookup_timeout_seconds,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are loaded only once,
    keeping the environment snapshot consistent across the
    application lifecycle.

    Returns:
        Settings: Configured application settings
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(
    settings: Optional[Settings] = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Configure application-wide logging.

    Development mode (or DEBUG=true) switches to DEBUG level, which is
    where request-level detail such as masked tokens is logged.

    Args:
        settings: Settings to read the mode from (defaults to get_settings())
        level: Logging level outside development

    Returns:
        Configured package logger
    """
    settings = settings or get_settings()

    if settings.debug or settings.is_development:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return logging.getLogger("whatsdish_gateway")
