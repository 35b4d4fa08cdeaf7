"""
Bearer credential helpers.

Tokens are issued by WhatsDish and are opaque to the gateway: they are read
from the Authorization header, forwarded, and never inspected or stored.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from whatsdish_gateway.core.exceptions import Unauthorized

bearer_scheme = HTTPBearer(auto_error=False, description="WhatsDish access token")


def mask_token(token: Optional[str]) -> str:
    """Render a token safe for logs: first and last four characters only."""
    if not token:
        return "undefined"
    if len(token) > 8:
        return f"{token[:4]}...{token[-4:]}"
    return "****"


async def optional_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Bearer token from the Authorization header, or None."""
    if credentials is None:
        return None
    token = credentials.credentials.strip()
    return token or None


async def require_bearer_token(
    token: Optional[str] = Depends(optional_bearer_token),
) -> str:
    """Bearer token from the Authorization header; 401 when absent."""
    if token is None:
        raise Unauthorized()
    return token
