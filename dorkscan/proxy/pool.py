"""Read-only pool of validated proxies with uniform random selection.

The pool is built once from the validator's survivors and then shared by every
search task. Membership never changes after construction, so concurrent reads
need no locking.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Iterable, Iterator

from dorkscan.errors import PoolExhaustedError
from dorkscan.proxy.types import ProxyEndpoint, ProxyScheme

logger = logging.getLogger(__name__)


class ProxyPool:
    """Immutable, ordered collection of validated :class:`ProxyEndpoint`."""

    def __init__(
        self,
        endpoints: Iterable[ProxyEndpoint],
        *,
        rng: random.Random | None = None,
    ) -> None:
        self._endpoints: tuple[ProxyEndpoint, ...] = tuple(endpoints)
        self._rng = rng or random.Random()

    def __len__(self) -> int:
        return len(self._endpoints)

    def __bool__(self) -> bool:
        return bool(self._endpoints)

    def __iter__(self) -> Iterator[ProxyEndpoint]:
        return iter(self._endpoints)

    def __contains__(self, endpoint: object) -> bool:
        return any(endpoint is member for member in self._endpoints)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def choose(self, exclude: ProxyEndpoint | None = None) -> ProxyEndpoint:
        """Pick an endpoint uniformly at random.

        When *exclude* is given and the pool holds more than one endpoint, the
        excluded one is never returned.

        Raises ``PoolExhaustedError`` on an empty pool.
        """
        if not self._endpoints:
            raise PoolExhaustedError()

        if exclude is None or len(self._endpoints) == 1:
            return self._rng.choice(self._endpoints)

        candidates = [p for p in self._endpoints if p is not exclude]
        return self._rng.choice(candidates)

    # ------------------------------------------------------------------
    # Lifecycle / stats
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close every endpoint's HTTP client."""
        await asyncio.gather(
            *(endpoint.aclose() for endpoint in self._endpoints),
            return_exceptions=True,
        )

    def get_stats(self) -> dict:
        """Return pool statistics for the run summary."""
        https = sum(1 for p in self._endpoints if p.scheme is ProxyScheme.HTTPS)
        return {
            "total": len(self._endpoints),
            "https": https,
            "http": len(self._endpoints) - https,
        }
