"""
OTP Login Package

Usage:
    from whatsdish_gateway.services.otp import IpResolver, OtpFlowController

    otp = OtpFlowController(upstream, IpResolver.from_config(config, http))
    await otp.send_code("+16045551234")
"""

from whatsdish_gateway.services.otp.controller import (
    TRIGGER_PATH,
    VERIFY_PATH,
    OtpFlowController,
    VerificationRequest,
)
from whatsdish_gateway.services.otp.ip_resolver import (
    DEFAULT_CLIENT_IP,
    ConnectionAddressStrategy,
    ExternalLookupStrategy,
    IpResolutionStrategy,
    IpResolver,
    ResolvedIp,
    StaticAddressStrategy,
)

__all__ = [
    "OtpFlowController",
    "VerificationRequest",
    "TRIGGER_PATH",
    "VERIFY_PATH",
    "IpResolver",
    "IpResolutionStrategy",
    "ExternalLookupStrategy",
    "ConnectionAddressStrategy",
    "StaticAddressStrategy",
    "ResolvedIp",
    "DEFAULT_CLIENT_IP",
]
