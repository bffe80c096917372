"""Fake network helpers and hypothesis strategies shared by the test suite."""

from __future__ import annotations

from collections.abc import Callable

import httpx
from hypothesis import strategies as st

from dorkscan.models.tasks import SearchEngine
from dorkscan.proxy.types import ProxyEndpoint, ProxyScheme

Handler = Callable[[str, httpx.Request], httpx.Response]


def mock_client_factory(handler: Handler) -> Callable[[str], httpx.AsyncClient]:
    """Client factory whose clients answer through *handler(proxy_url, request)*."""

    def factory(proxy_url: str) -> httpx.AsyncClient:
        transport = httpx.MockTransport(lambda request: handler(proxy_url, request))
        return httpx.AsyncClient(transport=transport)

    return factory


def html_response(body: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, text=body, headers={"Content-Type": "text/html"})


def make_endpoint(
    host: str = "10.0.0.1",
    port: int = 8080,
    handler: Handler | None = None,
    scheme: ProxyScheme | None = ProxyScheme.HTTP,
) -> ProxyEndpoint:
    """Build an endpoint backed by a MockTransport (404 for everything by default)."""
    handler = handler or (lambda _proxy, _request: httpx.Response(404))
    endpoint = ProxyEndpoint(
        raw_address=f"{host}:{port}",
        host=host,
        port=port,
        client_factory=mock_client_factory(handler),
    )
    if scheme is not None:
        endpoint.qualify(scheme)
    return endpoint


async def no_sleep(_seconds: float) -> None:
    return None


class RecordingSleep:
    """Awaitable sleep stand-in that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


# ---------------------------------------------------------------------------
# Hypothesis strategies (reusable across property tests)
# ---------------------------------------------------------------------------

engines = st.sampled_from(list(SearchEngine))

hostnames = st.from_regex(r"[a-z]([a-z0-9-]{0,11}[a-z0-9])?\.(com|org|net|io|co\.uk)", fullmatch=True)
ipv4_hosts = st.tuples(*[st.integers(min_value=0, max_value=255)] * 4).map(
    lambda parts: ".".join(str(p) for p in parts)
)
proxy_hosts = st.one_of(hostnames, ipv4_hosts)
ports = st.integers(min_value=1, max_value=65535)
usernames = st.text(
    alphabet="abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-.", min_size=1, max_size=16
)
passwords = st.text(
    alphabet="abcdefghijklmnopqrstuvwxyz0123456789_-.!$%:", min_size=1, max_size=16
)
dorks = st.text(alphabet="abcdefghijklmnopqrstuvwxyz:/._ ", min_size=1, max_size=30).map(str.strip).filter(bool)
