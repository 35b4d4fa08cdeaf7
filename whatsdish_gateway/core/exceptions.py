"""
Gateway Error Taxonomy

Every per-request failure is raised as a GatewayError subclass and turned
into a JSON response by the handlers registered in main.py:

    InvalidRequest          400  malformed or missing client input
    Unauthorized            401  missing bearer token
    InvalidCode             400  verification code rejected upstream
    VerificationIncomplete  400  verification accepted but no token returned
    UpstreamUnavailable     500  provider unreachable or failed
    DataStoreError          500  Supabase query failed
    InternalError           500  anything unexpected

UpstreamError is the odd one out: it carries the provider's own status and
body, which are relayed to the client unchanged.

ConfigurationError is fatal and only raised at startup.

Version: 1.0.0
"""

from typing import Any, Optional


class ConfigurationError(Exception):
    """Required environment variables are missing."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            "Missing required environment variables: " + ", ".join(self.missing)
        )


class GatewayError(Exception):
    """Base class for errors returned to the client as {"error": message}."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class InvalidRequest(GatewayError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(GatewayError):
    status_code = 401
    default_message = "Token is required"


class InvalidCode(GatewayError):
    status_code = 400
    default_message = "Invalid verification code"


class VerificationIncomplete(GatewayError):
    status_code = 400
    default_message = "Failed to retrieve token."


class UpstreamUnavailable(GatewayError):
    status_code = 500
    default_message = "Upstream service unavailable"


class DataStoreError(GatewayError):
    status_code = 500
    default_message = "Data store query failed"


class InternalError(GatewayError):
    status_code = 500
    default_message = "Internal server error"


class UpstreamError(GatewayError):
    """
    A non-2xx provider response relayed verbatim.

    Attributes:
        status_code: Provider HTTP status
        body: Parsed provider JSON body
    """

    def __init__(self, status_code: int, body: Any):
        self.body = body
        super().__init__(f"Upstream responded with {status_code}", status_code=status_code)
