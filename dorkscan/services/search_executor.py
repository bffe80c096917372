"""Search executor — one fetch-and-extract attempt.

Pipeline for a single attempt: engine profile lookup → query URL build →
GET through the proxy's client with a random user agent → response
classification (transport error / non-200 / blocked) → structured extraction
with the engine's extractor → regex fallback when extraction finds nothing →
domain normalization.

The executor never retries and never sleeps; retry decisions belong to the
RetryCoordinator. HTML parsing runs in a worker thread so a large page never
stalls the event loop.
"""

from __future__ import annotations

import asyncio
import logging
import re

import httpx

from dorkscan.engines.base import EngineProfile
from dorkscan.engines.registry import EngineRegistry, default_registry
from dorkscan.fingerprint import FingerprintRandomizer
from dorkscan.models.domain import normalize_domains
from dorkscan.models.tasks import AttemptOutcome, AttemptStatus, SearchEngine
from dorkscan.proxy.types import ProxyEndpoint

logger = logging.getLogger(__name__)

# Scan used when markup drift breaks the structured selectors. Captures the
# host part only, so trailing quotes, entities and script text never leak in.
FALLBACK_URL_RE = re.compile(r"https?://[A-Za-z0-9._-]+")


class SearchExecutor:
    """Performs one search attempt through one proxy.

    Dependencies are injected via the constructor so the executor is testable
    with fake transports and a seeded fingerprint source.
    """

    def __init__(
        self,
        *,
        registry: EngineRegistry | None = None,
        fingerprint: FingerprintRandomizer | None = None,
    ) -> None:
        self._registry = registry or default_registry()
        self._fingerprint = fingerprint or FingerprintRandomizer()

    async def execute(
        self,
        engine: SearchEngine,
        dork: str,
        page_index: int,
        proxy: ProxyEndpoint,
    ) -> AttemptOutcome:
        """Run one attempt and classify it.

        Returns an :class:`AttemptOutcome` whose status is ``success`` (one or
        more domains), ``empty``, ``failed`` or ``blocked``.
        """
        profile = self._registry.get(engine)
        params = profile.build_params(dork, page_index)
        log_extra = {
            "engine": engine.value,
            "dork": dork,
            "page": page_index + 1,
            "proxy_used": proxy.address,
        }
        logger.debug(
            "Searching %s: dork '%s', page %d via %s",
            engine.value,
            dork,
            page_index + 1,
            proxy.address,
            extra=log_extra,
        )

        try:
            response = await proxy.client.get(
                profile.base_url,
                params=params,
                headers=self._fingerprint.headers(),
            )
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
            reason = str(exc) or type(exc).__name__
            logger.warning(
                "Failed to fetch %s for dork '%s', page %d: %s",
                engine.value,
                dork,
                page_index + 1,
                reason,
                extra={**log_extra, "error_reason": reason},
            )
            return AttemptOutcome(AttemptStatus.FAILED, reason=reason)

        if response.status_code != 200:
            reason = f"HTTP {response.status_code}"
            logger.warning(
                "Failed to fetch %s for dork '%s', page %d: %s",
                engine.value,
                dork,
                page_index + 1,
                reason,
                extra={**log_extra, "error_reason": reason},
            )
            return AttemptOutcome(AttemptStatus.FAILED, reason=reason)

        html = response.text
        if profile.is_blocked(html):
            logger.warning(
                "CAPTCHA detected on %s for dork '%s', page %d; rotating proxy",
                engine.value,
                dork,
                page_index + 1,
                extra={**log_extra, "error_reason": "blocked"},
            )
            return AttemptOutcome(AttemptStatus.BLOCKED, reason="blocked")

        domains = await asyncio.to_thread(self.extract_domains, profile, html)

        logger.info(
            "%s: dork '%s', page %d found %d domains",
            engine.value,
            dork,
            page_index + 1,
            len(domains),
            extra={**log_extra, "domains_found": len(domains)},
        )
        if not domains:
            return AttemptOutcome(AttemptStatus.EMPTY, reason="no results")
        return AttemptOutcome(AttemptStatus.SUCCESS, domains=tuple(domains))

    @staticmethod
    def extract_domains(profile: EngineProfile, html: str) -> list[str]:
        """Parse result domains out of a page, falling back to a URL scan."""
        domains = normalize_domains(profile.extractor.extract(html), profile.excluded_hosts)
        if not domains:
            domains = normalize_domains(FALLBACK_URL_RE.findall(html), profile.excluded_hosts)
            if domains:
                logger.debug(
                    "Structured extraction empty on %s, regex fallback found %d domains",
                    profile.engine.value,
                    len(domains),
                )
        return domains
