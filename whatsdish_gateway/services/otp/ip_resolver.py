"""
Client IP Resolution

The verify call to WhatsDish carries an IP address. Looking it up is an
enrichment, not a hard dependency, so resolution walks an ordered list of
strategies and takes the first answer. The last strategy always answers.

Strategies:
    - ExternalLookupStrategy: public IP lookup service (checkip.amazonaws.com)
    - ConnectionAddressStrategy: peer address of the inbound connection
    - StaticAddressStrategy: fixed loopback default

Version: 1.0.0
"""

import ipaddress
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

import httpx

from whatsdish_gateway.core.config import GatewayConfig

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_IP = "127.0.0.1"


@dataclass(frozen=True)
class ResolvedIp:
    """An IP address and the strategy that produced it."""
    address: str
    source: str


def _valid_ip(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    value = value.strip()
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return None
    return value


class IpResolutionStrategy(ABC):
    """One way of finding the client IP."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def resolve(self, connection_ip: Optional[str]) -> Optional[str]:
        """
        Return an IP address, or None to let the next strategy try.

        Args:
            connection_ip: Peer address of the inbound request, if known
        """
        pass


class ExternalLookupStrategy(IpResolutionStrategy):
    """Ask a plain-text lookup service for the public address."""

    def __init__(self, http: httpx.AsyncClient, url: str, timeout: float = 3.0):
        self._http = http
        self._url = url
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "lookup"

    async def resolve(self, connection_ip: Optional[str]) -> Optional[str]:
        try:
            response = await self._http.get(self._url, timeout=self._timeout)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"IP lookup failed - {e!r}")
            return None

        address = _valid_ip(response.text)
        if address is None:
            logger.warning(f"IP lookup returned an unusable body: {response.text[:64]!r}")
        return address


class ConnectionAddressStrategy(IpResolutionStrategy):
    """Use the peer address of the inbound connection."""

    @property
    def name(self) -> str:
        return "connection"

    async def resolve(self, connection_ip: Optional[str]) -> Optional[str]:
        return _valid_ip(connection_ip)


class StaticAddressStrategy(IpResolutionStrategy):
    """Always answer with a fixed address."""

    def __init__(self, address: str = DEFAULT_CLIENT_IP):
        self._address = address

    @property
    def name(self) -> str:
        return "default"

    async def resolve(self, connection_ip: Optional[str]) -> Optional[str]:
        return self._address


class IpResolver:
    """
    Ordered strategy chain; first non-empty answer wins.

    A StaticAddressStrategy is appended when the chain does not already end
    with one, so resolve() always returns an address.

    Example:
        >>> resolver = IpResolver.from_config(config, http)
        >>> resolved = await resolver.resolve("10.0.0.5")
        >>> resolved.source
        'lookup'
    """

    def __init__(self, strategies: Sequence[IpResolutionStrategy]):
        chain = list(strategies)
        if not chain or not isinstance(chain[-1], StaticAddressStrategy):
            chain.append(StaticAddressStrategy())
        self.strategies: tuple[IpResolutionStrategy, ...] = tuple(chain)

    @classmethod
    def from_config(cls, config: GatewayConfig, http: httpx.AsyncClient) -> "IpResolver":
        return cls([
            ExternalLookupStrategy(
                http,
                url=config.ip_lookup_url,
                timeout=config.ip_lookup_timeout_seconds,
            ),
            ConnectionAddressStrategy(),
            StaticAddressStrategy(),
        ])

    async def resolve(self, connection_ip: Optional[str] = None) -> ResolvedIp:
        for strategy in self.strategies:
            address = await strategy.resolve(connection_ip)
            if address:
                logger.debug(f"Client IP {address} (via {strategy.name})")
                return ResolvedIp(address=address, source=strategy.name)

        # unreachable: the chain always ends with a StaticAddressStrategy
        raise RuntimeError("IP resolution chain produced no address")
