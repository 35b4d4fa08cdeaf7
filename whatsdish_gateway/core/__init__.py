"""
Core module initialization.
Exports configuration, logging and error utilities.
"""

from whatsdish_gateway.core.config import (
    EnvironmentMode,
    GatewayConfig,
    Settings,
    get_settings,
    setup_logging,
)
from whatsdish_gateway.core.exceptions import ConfigurationError, GatewayError

__all__ = [
    "get_settings",
    "setup_logging",
    "Settings",
    "EnvironmentMode",
    "GatewayConfig",
    "ConfigurationError",
    "GatewayError",
]
