"""Domain normalization logic.

Turns an extracted link into a result Domain:
- cut the link at the first whitespace or breadcrumb separator (``›``, also in
  its mis-decoded ``â€º`` form) that search result markup appends to URLs
- parse the URL and take its hostname (lower-cased, port dropped)
- encode internationalized names to their ASCII (punycode) form
- strip a leading ``www.``
- drop anything that is not a well-formed DNS name or IPv4 address
- drop empty hosts and denylisted hosts (exact match or any subdomain)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

# Hosts that only show up through markup namespaces and boilerplate
GLOBAL_EXCLUDED_HOSTS: frozenset[str] = frozenset({
    "w3.org",
    "schema.org",
})

_LINK_TERMINATORS = re.compile(r"\s|›|â€º")

_LABEL = r"[a-z0-9](?:[a-z0-9_-]{0,61}[a-z0-9])?"
_HOSTNAME_RE = re.compile(rf"{_LABEL}(?:\.{_LABEL})*")


def clean_link(raw: str) -> str:
    """Strip surrounding whitespace and cut trailing breadcrumb garbage."""
    return _LINK_TERMINATORS.split(raw.strip(), maxsplit=1)[0]


def is_excluded(host: str, excluded_hosts: Iterable[str]) -> bool:
    """Return True if *host* equals or is a subdomain of an excluded host."""
    for excluded in excluded_hosts:
        if host == excluded or host.endswith("." + excluded):
            return True
    return False


def is_valid_domain(domain: str, excluded_hosts: Iterable[str] = GLOBAL_EXCLUDED_HOSTS) -> bool:
    """Check the result Domain invariants."""
    return (
        bool(domain)
        and domain == domain.lower()
        and not domain.startswith("www.")
        and _HOSTNAME_RE.fullmatch(domain) is not None
        and not is_excluded(domain, excluded_hosts)
    )


def extract_domain(raw_url: str, excluded_hosts: Iterable[str] = ()) -> str | None:
    """Normalize one link into a Domain, or ``None`` if it yields no usable host."""
    cleaned = clean_link(raw_url)
    try:
        host = urlsplit(cleaned).hostname
    except ValueError:
        logger.debug("Failed to extract domain from %s", raw_url)
        return None

    if not host:
        logger.debug("Empty hostname after extraction from URL: %s", raw_url)
        return None

    try:
        host = host.encode("idna").decode("ascii")
    except UnicodeError:
        logger.debug("Hostname is not IDNA-encodable: %s", raw_url)
        return None

    # Repeated www. prefixes are collapsed too (www.www.example.com)
    while host.startswith("www."):
        host = host[4:]
    host = host.rstrip(".")

    if _HOSTNAME_RE.fullmatch(host) is None:
        logger.debug("Rejected malformed hostname %r from %s", host, raw_url)
        return None
    if is_excluded(host, GLOBAL_EXCLUDED_HOSTS) or is_excluded(host, excluded_hosts):
        return None
    return host


def normalize_domains(raw_urls: Iterable[str], excluded_hosts: Iterable[str] = ()) -> list[str]:
    """Normalize many links, keeping first-seen order and dropping duplicates."""
    excluded = tuple(excluded_hosts)
    seen: set[str] = set()
    domains: list[str] = []
    for raw_url in raw_urls:
        domain = extract_domain(raw_url, excluded)
        if domain is None or domain in seen:
            continue
        seen.add(domain)
        domains.append(domain)
    return domains
