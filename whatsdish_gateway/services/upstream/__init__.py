"""
Upstream Client Package

Usage:
    from whatsdish_gateway.services.upstream import WhatsDishClient

    client = WhatsDishClient(config, http)
    result = await client.call("/api/rn/profile", "GET", token=token)
"""

from whatsdish_gateway.services.upstream.base import BaseUpstreamClient, UpstreamResult
from whatsdish_gateway.services.upstream.whatsdish import WhatsDishClient

__all__ = [
    "BaseUpstreamClient",
    "UpstreamResult",
    "WhatsDishClient",
]
