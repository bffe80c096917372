"""Parsing of ``[user:pass@]host:port`` proxy lines."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

import httpx

from dorkscan.proxy.types import ClientFactory, ProxyEndpoint

logger = logging.getLogger(__name__)

# Placeholder entry, skipped without a warning
SENTINEL_PROXY = "0.0.0.0:80"

_LABEL = r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"

_PROXY_RE = re.compile(
    r"(?:(?P<username>[^:@\s]+):(?P<password>[^@\s]+)@)?"
    rf"(?P<host>\[[0-9A-Fa-f:.]+\]|{_LABEL}(?:\.{_LABEL})*)"
    r":(?P<port>\d{1,5})"
)


def parse_proxy(line: str, client_factory: ClientFactory | None = None) -> ProxyEndpoint | None:
    """Parse one proxy line into a :class:`ProxyEndpoint`.

    The host must be a DNS name, an IPv4 address or a bracketed IPv6
    address. Returns ``None`` (after logging a warning) when the line is
    malformed. Never raises for bad input.
    """
    raw = line.strip()
    match = _PROXY_RE.fullmatch(raw)
    if match is None:
        logger.warning("Invalid proxy format, skipping: %s", raw)
        return None

    port = int(match.group("port"))
    if not 1 <= port <= 65535:
        logger.warning("Invalid proxy port %d, skipping: %s", port, raw)
        return None

    try:
        return ProxyEndpoint(
            raw_address=raw,
            host=match.group("host"),
            port=port,
            username=match.group("username"),
            password=match.group("password"),
            client_factory=client_factory,
        )
    except (httpx.InvalidURL, ValueError) as exc:
        logger.warning("Invalid proxy address, skipping: %s (%s)", raw, exc)
        return None


def parse_proxy_lines(
    lines: Iterable[str],
    client_factory: ClientFactory | None = None,
) -> list[ProxyEndpoint]:
    """Parse every usable line, skipping blanks, the sentinel and malformed entries."""
    endpoints: list[ProxyEndpoint] = []
    for line in lines:
        raw = line.strip()
        if not raw or raw == SENTINEL_PROXY:
            continue
        endpoint = parse_proxy(raw, client_factory)
        if endpoint is not None:
            endpoints.append(endpoint)
    return endpoints
