"""URL validation — scheme allow-list and private-address blocking.

validate_url() is purely syntactic and never touches the network.
PublicOnlyResolver is installed on the fetch session's connector, so host
names are checked at connect time against the very addresses aiohttp is
about to dial. A name with any non-public answer is refused.
"""

import ipaddress
import logging
import socket
from urllib.parse import urlsplit

from aiohttp.abc import AbstractResolver, ResolveResult
from aiohttp.resolver import DefaultResolver

from studio_core.extraction.errors import UnsafeUrlError, UrlValidationError

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")
BLOCKED_HOSTNAMES = frozenset({
    "localhost",
    "metadata",
    "metadata.google.internal",
})
BLOCKED_SUFFIXES = (".localhost", ".local", ".localdomain", ".internal", ".lan", ".home.arpa")

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


def is_public_address(ip: IPAddress) -> bool:
    """True when the address is globally routable unicast."""
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped:
        ip = ip.ipv4_mapped
    return ip.is_global and not ip.is_multicast


def _check_host(host: str) -> None:
    if host in BLOCKED_HOSTNAMES or host.endswith(BLOCKED_SUFFIXES):
        raise UnsafeUrlError(f"Access to internal host '{host}' is not allowed")
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return
    if not is_public_address(ip):
        raise UnsafeUrlError(f"Access to private address '{host}' is not allowed")


def validate_url(url: str | None) -> str:
    """Validate a user-supplied URL and return it normalised.

    Raises:
        UrlValidationError: empty, malformed, or non-HTTP(S) URL.
        UnsafeUrlError: host is an internal name or a non-public IP literal.
    """
    url = (url or "").strip()
    if not url:
        raise UrlValidationError("URL is required")

    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        raise UrlValidationError("Only HTTP and HTTPS protocols are supported")
    try:
        host = parts.hostname
        parts.port  # raises on out-of-range / non-numeric ports
    except ValueError as e:
        raise UrlValidationError("Invalid URL format") from e
    if not host:
        raise UrlValidationError("Invalid URL format")
    if parts.username or parts.password:
        raise UrlValidationError("URLs with embedded credentials are not supported")

    _check_host(host.rstrip(".").lower())
    return parts._replace(scheme=scheme).geturl()


class PublicOnlyResolver(AbstractResolver):
    """DNS resolver that refuses names resolving to non-public addresses.

    Wraps aiohttp's default resolver (or `resolver`, when given). Every
    answer is checked, so a rebinding name that flips between a public and a
    private address between lookups never gets a connection to the latter.

    IP-literal hosts bypass resolvers in aiohttp; validate_url() covers those.
    """

    def __init__(self, resolver: AbstractResolver | None = None) -> None:
        self._resolver = resolver

    async def resolve(
        self,
        host: str,
        port: int = 0,
        family: socket.AddressFamily = socket.AF_INET,
    ) -> list[ResolveResult]:
        if self._resolver is None:
            # Needs a running loop, so it can't be built in __init__
            self._resolver = DefaultResolver()
        results = await self._resolver.resolve(host, port, family)
        for result in results:
            # Strip an IPv6 zone id ("fe80::1%eth0")
            ip = ipaddress.ip_address(result["host"].split("%", 1)[0])
            if not is_public_address(ip):
                logger.warning("Blocked fetch: %s resolves to %s", host, ip)
                raise UnsafeUrlError(f"Host '{host}' resolves to a private address")
        return results

    async def close(self) -> None:
        if self._resolver is not None:
            await self._resolver.close()
