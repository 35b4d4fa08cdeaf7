"""
                        Services Module

Collaborators behind the gateway routes, all built from one immutable
GatewayConfig and one shared httpx.AsyncClient:

    - upstream: WhatsDish provider client
    - datastore: Supabase read-only store
    - otp: phone login flow (with client IP resolution)
"""

from dataclasses import dataclass

import httpx

from whatsdish_gateway.core.config import GatewayConfig
from whatsdish_gateway.services.datastore import BaseDataStore, SupabaseDataStore
from whatsdish_gateway.services.otp import IpResolver, OtpFlowController
from whatsdish_gateway.services.upstream import BaseUpstreamClient, WhatsDishClient


@dataclass(frozen=True)
class GatewayServices:
    """Per-process collaborator set, stored on app.state by the lifespan."""
    config: GatewayConfig
    upstream: BaseUpstreamClient
    datastore: BaseDataStore
    otp: OtpFlowController


def build_services(config: GatewayConfig, http: httpx.AsyncClient) -> GatewayServices:
    """Wire the production collaborators for the resolved environment."""
    upstream = WhatsDishClient(config, http)
    return GatewayServices(
        config=config,
        upstream=upstream,
        datastore=SupabaseDataStore(config, http),
        otp=OtpFlowController(
            upstream,
            IpResolver.from_config(config, http),
            language=config.verify_language,
        ),
    )


__all__ = ["GatewayServices", "build_services"]
