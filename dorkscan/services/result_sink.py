"""Concurrency-safe set of discovered domains.

Written by every search task, read in full once after the scheduler reports
that all tasks finished. Membership check and insert happen under one lock,
so a domain found by many tasks is stored and counted exactly once.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

logger = logging.getLogger(__name__)


class ResultSink:
    """Deduplicating domain accumulator guarded by a ``threading.Lock``."""

    def __init__(self) -> None:
        self._domains: set[str] = set()
        self._lock = threading.Lock()

    def add(self, domain: str) -> bool:
        """Insert *domain*; return True if it was not present before."""
        if not domain:
            return False
        with self._lock:
            if domain in self._domains:
                return False
            self._domains.add(domain)
            return True

    def add_all(self, domains: Iterable[str]) -> int:
        """Insert many domains; return how many were new."""
        added = 0
        with self._lock:
            for domain in domains:
                if domain and domain not in self._domains:
                    self._domains.add(domain)
                    added += 1
        return added

    def __contains__(self, domain: object) -> bool:
        with self._lock:
            return domain in self._domains

    def __len__(self) -> int:
        with self._lock:
            return len(self._domains)

    def snapshot(self) -> list[str]:
        """Return every stored domain, sorted."""
        with self._lock:
            return sorted(self._domains)
