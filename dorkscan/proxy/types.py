"""Proxy data models."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import quote

import httpx

from dorkscan.errors import ProxyAlreadyQualifiedError

ClientFactory = Callable[[str], httpx.AsyncClient]


class ProxyScheme(str, Enum):
    """Capability assigned to an endpoint by validation."""

    HTTP = "http"
    HTTPS = "https"


def build_proxy_client(proxy_url: str, timeout_seconds: float = 30.0) -> httpx.AsyncClient:
    """Create the dedicated client for one proxy.

    TLS verification is disabled because proxies are untrusted and commonly
    intercept with self-signed certificates.
    """
    return httpx.AsyncClient(
        proxy=proxy_url,
        verify=False,
        timeout=httpx.Timeout(timeout_seconds),
        limits=httpx.Limits(
            max_connections=100,
            max_keepalive_connections=100,
            keepalive_expiry=90.0,
        ),
        follow_redirects=False,
    )


@dataclass(eq=False)
class ProxyEndpoint:
    """A single proxy parsed from one input line, with its own HTTP client.

    Everything is fixed at construction except ``url``, which validation sets
    exactly once via :meth:`qualify`.
    """

    raw_address: str
    host: str
    port: int
    username: str | None = None
    password: str | None = None
    client_factory: ClientFactory | None = field(default=None, repr=False)
    scheme: ProxyScheme | None = field(default=None, init=False)
    client: httpx.AsyncClient = field(init=False, repr=False)

    def __post_init__(self) -> None:
        factory = self.client_factory or build_proxy_client
        self.client = factory(self.proxy_url)

    @property
    def address(self) -> str:
        """host:port string, safe to log."""
        return f"{self.host}:{self.port}"

    @property
    def proxy_url(self) -> str:
        """URL the client uses to reach the proxy (always plain HTTP)."""
        if self.username is not None and self.password is not None:
            return (
                f"http://{quote(self.username, safe='')}:{quote(self.password, safe='')}"
                f"@{self.host}:{self.port}"
            )
        return f"http://{self.host}:{self.port}"

    @property
    def url(self) -> str | None:
        """Scheme-qualified URL, ``None`` until validated."""
        if self.scheme is None:
            return None
        return f"{self.scheme.value}://{self.raw_address}"

    def qualify(self, scheme: ProxyScheme) -> None:
        """Record the validated capability. Allowed once."""
        if self.scheme is not None:
            raise ProxyAlreadyQualifiedError(
                f"Proxy {self.address} already qualified as {self.scheme.value}"
            )
        self.scheme = scheme

    async def aclose(self) -> None:
        await self.client.aclose()
