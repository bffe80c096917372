"""Proxy package — line parsing, liveness validation, and the shared pool."""

from dorkscan.proxy.parser import parse_proxy, parse_proxy_lines
from dorkscan.proxy.pool import ProxyPool
from dorkscan.proxy.types import ProxyEndpoint, ProxyScheme, build_proxy_client
from dorkscan.proxy.validator import ProbeResult, ProxyValidator

__all__ = [
    "ProbeResult",
    "ProxyEndpoint",
    "ProxyPool",
    "ProxyScheme",
    "ProxyValidator",
    "build_proxy_client",
    "parse_proxy",
    "parse_proxy_lines",
]
