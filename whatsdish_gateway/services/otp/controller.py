"""
OTP Login Flow

Two-phase phone verification against WhatsDish. The provider holds all
code/session state; the gateway only sequences the calls and maps outcomes:

    send_code    POST /api/auth/login-with-sms-trigger   {to}
    verify_code  POST /api/auth/login-with-sms-verify    {to, code, Ip, lang}

Neither call is retried. Re-sending a code is the user's decision.

Version: 1.0.0
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from whatsdish_gateway.core.exceptions import (
    InvalidCode,
    InvalidRequest,
    UpstreamUnavailable,
    VerificationIncomplete,
)
from whatsdish_gateway.core.security import mask_token
from whatsdish_gateway.services.otp.ip_resolver import IpResolver
from whatsdish_gateway.services.upstream.base import BaseUpstreamClient

logger = logging.getLogger(__name__)

TRIGGER_PATH = "/api/auth/login-with-sms-trigger"
VERIFY_PATH = "/api/auth/login-with-sms-verify"


@dataclass(frozen=True)
class VerificationRequest:
    """One verify attempt; client_ip is filled in during verify_code."""
    phone_number: str
    code: Optional[str] = None
    client_ip: Optional[str] = None

    def to_upstream(self, language: str) -> dict[str, Any]:
        return {
            "to": self.phone_number,
            "code": self.code,
            "Ip": self.client_ip,
            "lang": language,
        }


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def extract_token(body: Any) -> Optional[str]:
    """Token at body["result"]["token"], if present and non-empty."""
    if not isinstance(body, dict):
        return None
    result = body.get("result")
    if not isinstance(result, dict):
        return None
    token = result.get("token")
    if isinstance(token, str) and token.strip():
        return token
    return None


class OtpFlowController:
    """
    Orchestrates the send/verify sequence.

    Args:
        upstream: WhatsDish client
        ip_resolver: Strategy chain used to enrich verify calls
        language: Value sent as "lang" on verify
    """

    def __init__(
        self,
        upstream: BaseUpstreamClient,
        ip_resolver: IpResolver,
        language: str = "en",
    ):
        self.upstream = upstream
        self.ip_resolver = ip_resolver
        self.language = language

    async def send_code(self, phone_number: Optional[str]) -> dict[str, str]:
        """
        Ask WhatsDish to text a login code.

        Raises:
            InvalidRequest: Phone number missing
            UpstreamUnavailable: Provider failed or unreachable
        """
        if _blank(phone_number):
            raise InvalidRequest("Phone number is required.")
        phone_number = phone_number.strip()

        logger.info(f"Sending verification code to: {phone_number}")

        try:
            result = await self.upstream.call(TRIGGER_PATH, "POST", body={"to": phone_number})
        except UpstreamUnavailable as e:
            raise UpstreamUnavailable("Failed to send verification code") from e

        if not result.ok:
            logger.error(f"Failed to send verification code: upstream {result.status_code}")
            raise UpstreamUnavailable("Failed to send verification code")

        logger.info("Verification code sent successfully")
        return {"message": "Verification code sent!"}

    async def verify_code(
        self,
        phone_number: Optional[str],
        code: Optional[str],
        connection_ip: Optional[str] = None,
    ) -> dict[str, str]:
        """
        Exchange a code for a WhatsDish token.

        Raises:
            InvalidRequest: Phone number or code missing
            InvalidCode: Provider rejected the code
            VerificationIncomplete: Provider accepted but returned no token
            UpstreamUnavailable: Provider unreachable
        """
        if _blank(phone_number) or _blank(code):
            raise InvalidRequest("Phone number and code are required.")

        resolved = await self.ip_resolver.resolve(connection_ip)
        request = VerificationRequest(
            phone_number=phone_number.strip(),
            code=str(code).strip(),
            client_ip=resolved.address,
        )

        logger.info(f"Verifying code for: {request.phone_number} (ip via {resolved.source})")

        result = await self.upstream.call(
            VERIFY_PATH,
            "POST",
            body=request.to_upstream(self.language),
        )

        if not result.ok:
            logger.warning(f"Invalid verification code: upstream {result.status_code}")
            raise InvalidCode()

        token = extract_token(result.body)
        if token is None:
            logger.error("Failed to retrieve token")
            raise VerificationIncomplete()

        logger.info(f"Verification success, token received: {mask_token(token)}")
        return {"message": "Login successful!", "token": token}
