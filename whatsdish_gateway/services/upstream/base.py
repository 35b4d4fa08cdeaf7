"""
Upstream Client Abstract Base Class

Defines the interface contract for calling the WhatsDish provider.
The gateway only ever needs one primitive: issue a request, optionally
authenticated with the caller's bearer token, and classify the outcome.

Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class UpstreamResult:
    """
    Standardized result of one provider call.

    Attributes:
        status_code: HTTP status returned by the provider
        body: Parsed JSON body (None if the body was not valid JSON)
        parsed: Whether the body was valid JSON
    """
    status_code: int
    body: Any = None
    parsed: bool = True

    @property
    def ok(self) -> bool:
        """True only for a 2xx status with a parseable body."""
        return self.parsed and 200 <= self.status_code < 300


class BaseUpstreamClient(ABC):
    """
    Abstract base class for provider clients.

    Example:
        >>> result = await client.call("/api/rn/profile", "GET", token="abc")
        >>> if result.ok:
        ...     print(result.body)
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the upstream provider.

        Returns:
            str: Provider name (e.g., "whatsdish")
        """
        pass

    @abstractmethod
    async def call(
        self,
        path: str,
        method: str = "GET",
        token: Optional[str] = None,
        body: Any = None,
    ) -> UpstreamResult:
        """
        Make a single request to the provider.

        Args:
            path: Path relative to the provider base URL (e.g. "/api/rn/profile")
            method: HTTP method
            token: Bearer token to forward, if any
            body: JSON-serializable request body, if any

        Returns:
            UpstreamResult: Status, body and classification

        Raises:
            UpstreamUnavailable: On timeout or transport failure
        """
        pass
