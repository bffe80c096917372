"""Concurrent proxy liveness validation.

Every candidate is probed through its own client against two reference
endpoints, TLS first. Classification:

- TLS probe returns 200  → HTTPS-capable, qualified as ``https://``
- else plain probe 200   → HTTP-capable, qualified as ``http://``
- else                   → discarded (client closed)

No retries: proxies are abundant and disposable, a single failed probe drops
the candidate. All probes run in parallel under a validation semaphore that is
independent of the search concurrency limit.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from dorkscan.errors import PoolExhaustedError
from dorkscan.fingerprint import FingerprintRandomizer
from dorkscan.proxy.pool import ProxyPool
from dorkscan.proxy.types import ProxyEndpoint, ProxyScheme

logger = logging.getLogger(__name__)

DEFAULT_HTTP_PROBE_URL = "http://httpbin.org/ip"
DEFAULT_HTTPS_PROBE_URL = "https://httpbin.org/ip"


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of probing one endpoint. ``http`` is False when not probed."""

    http: bool
    https: bool

    @property
    def scheme(self) -> ProxyScheme | None:
        if self.https:
            return ProxyScheme.HTTPS
        if self.http:
            return ProxyScheme.HTTP
        return None


class ProxyValidator:
    """Probes candidate proxies in parallel and builds the :class:`ProxyPool`.

    Parameters
    ----------
    concurrency:
        Maximum number of candidates probed at the same time.
    timeout_seconds:
        Per-request probe timeout.
    http_probe_url / https_probe_url:
        Reference endpoints expected to answer 200.
    fingerprint:
        Source of the rotating user agent.
    """

    def __init__(
        self,
        *,
        concurrency: int = 200,
        timeout_seconds: float = 30.0,
        http_probe_url: str = DEFAULT_HTTP_PROBE_URL,
        https_probe_url: str = DEFAULT_HTTPS_PROBE_URL,
        fingerprint: FingerprintRandomizer | None = None,
    ) -> None:
        self._concurrency = concurrency
        self._timeout_seconds = timeout_seconds
        self._http_probe_url = http_probe_url
        self._https_probe_url = https_probe_url
        self._fingerprint = fingerprint or FingerprintRandomizer()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def validate(self, endpoints: Sequence[ProxyEndpoint]) -> ProxyPool:
        """Probe every endpoint and return the pool of live ones, in input order.

        Raises
        ------
        PoolExhaustedError
            If *endpoints* is empty or no endpoint survives validation.
        """
        if not endpoints:
            raise PoolExhaustedError("No proxies loaded, nothing to validate")

        semaphore = asyncio.Semaphore(self._concurrency)

        async def _guarded(endpoint: ProxyEndpoint) -> ProbeResult:
            async with semaphore:
                return await self.probe(endpoint)

        logger.info(
            "Validating %d proxies (concurrency=%d)", len(endpoints), self._concurrency
        )
        results = await asyncio.gather(*(_guarded(endpoint) for endpoint in endpoints))

        live: list[ProxyEndpoint] = []
        dead: list[ProxyEndpoint] = []
        for endpoint, result in zip(endpoints, results):
            scheme = result.scheme
            if scheme is None:
                dead.append(endpoint)
                continue
            endpoint.qualify(scheme)
            live.append(endpoint)

        await asyncio.gather(*(endpoint.aclose() for endpoint in dead), return_exceptions=True)

        logger.info("%d valid proxies found after validation (%d dropped)", len(live), len(dead))
        if not live:
            raise PoolExhaustedError("No valid proxies after validation")
        return ProxyPool(live)

    async def probe(self, endpoint: ProxyEndpoint) -> ProbeResult:
        """Probe one endpoint: TLS reference first, plain reference only if TLS fails."""
        if await self._check(endpoint, self._https_probe_url, "HTTPS"):
            return ProbeResult(http=False, https=True)
        http_ok = await self._check(endpoint, self._http_probe_url, "HTTP")
        return ProbeResult(http=http_ok, https=False)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _check(self, endpoint: ProxyEndpoint, url: str, label: str) -> bool:
        try:
            response = await endpoint.client.get(
                url,
                headers=self._fingerprint.headers(),
                timeout=self._timeout_seconds,
            )
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
            logger.debug(
                "[DEAD %s] %s - error: %s", label, endpoint.address, str(exc) or type(exc).__name__
            )
            return False

        if response.status_code == 200:
            logger.info(
                "[LIVE %s] %s - status code: %d", label, endpoint.address, response.status_code
            )
            return True

        logger.debug(
            "[DEAD %s] %s - status code: %d", label, endpoint.address, response.status_code
        )
        return False
