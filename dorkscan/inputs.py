"""Dork/proxy list loading and result output."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from dorkscan.errors import ConfigurationError
from dorkscan.proxy.parser import parse_proxy_lines
from dorkscan.proxy.types import ClientFactory, ProxyEndpoint

logger = logging.getLogger(__name__)


def _read_lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8", errors="replace").splitlines()


def load_dorks(file_path: str | None) -> list[str]:
    """Load one dork per non-blank line.

    Raises
    ------
    ConfigurationError
        If no path was given, the file does not exist, or it holds no dorks.
    """
    if not file_path:
        raise ConfigurationError("Dork file is required (use -d to set it)")

    path = Path(file_path)
    if not path.is_file():
        raise ConfigurationError(f"Dork file '{file_path}' not found", path=file_path)

    dorks = [line.strip() for line in _read_lines(path) if line.strip()]
    if not dorks:
        raise ConfigurationError(f"Dork file '{file_path}' is empty", path=file_path)

    logger.info("Loaded %d dorks from '%s'", len(dorks), file_path)
    return dorks


def load_proxies(
    file_path: str,
    client_factory: ClientFactory | None = None,
) -> list[ProxyEndpoint]:
    """Load proxy endpoints from a ``[user:pass@]host:port`` list.

    A missing file yields an empty list; the caller decides that this is fatal.
    """
    path = Path(file_path)
    logger.info("Checking for proxy file at %s", path.resolve())
    if not path.is_file():
        logger.error("Proxy file '%s' not found", file_path)
        return []

    proxies = parse_proxy_lines(_read_lines(path), client_factory)
    logger.info("Loaded %d proxies from '%s'", len(proxies), file_path)
    return proxies


def append_results(file_path: str, domains: Iterable[str]) -> int:
    """Append one domain per line to *file_path*; return the number written."""
    path = Path(file_path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)

    written = 0
    with path.open("a", encoding="utf-8") as handle:
        for domain in domains:
            handle.write(f"{domain}\n")
            written += 1

    logger.info("Saved %d domains to %s", written, file_path)
    return written
