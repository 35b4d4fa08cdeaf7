"""
Pydantic Schemas for Request/Response Validation

Only the gateway's own payloads are modeled here. Proxied WhatsDish and
Supabase payloads are relayed as-is and stay untyped.

Version: 1.0.0
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class SendCodeRequest(BaseModel):
    """Request schema for POST /api/send-code."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    phone_number: Optional[str] = Field(
        None,
        alias="phoneNumber",
        examples=["+16045551234"],
    )
    # Older clients send "phone"
    phone: Optional[str] = Field(None, examples=["+16045551234"])

    @property
    def resolved_phone(self) -> Optional[str]:
        return self.phone_number or self.phone


class VerifyCodeRequest(SendCodeRequest):
    """Request schema for POST /api/verify-code."""

    code: Optional[Union[str, int]] = Field(None, examples=["123456"])

    @property
    def resolved_code(self) -> Optional[str]:
        return None if self.code is None else str(self.code)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class MessageResponse(BaseModel):
    """Generic confirmation."""
    message: str = Field(..., examples=["Verification code sent!"])


class LoginResponse(BaseModel):
    """Successful code verification."""
    message: str = Field(..., examples=["Login successful!"])
    token: str


class ErrorResponse(BaseModel):
    """Error body returned by every gateway-generated failure."""
    error: str = Field(..., examples=["Token is required"])


class HealthResponse(BaseModel):
    """Liveness check response."""
    status: str
    environment: str
    version: str
    timestamp: datetime
