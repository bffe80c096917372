"""Engine profiles and the result extractor interface.

An engine is a closed variant (``SearchEngine``) paired with an
``EngineProfile``: the search URL, a query-parameter builder, the bot/CAPTCHA
markers that identify a blocked response, the hosts that belong to the engine
itself, and a ``ResultExtractor`` that pulls result links out of the HTML.
Adding an engine means adding a profile module and registering it; the
executor never branches on engine identity.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from urllib.parse import urlsplit

from bs4 import BeautifulSoup

from dorkscan.models.domain import is_excluded
from dorkscan.models.tasks import SearchEngine

logger = logging.getLogger(__name__)

ParamsBuilder = Callable[[str, int], dict[str, str]]


class ResultExtractor(ABC):
    """Abstract extractor that all engine-specific extractors extend."""

    @abstractmethod
    def extract(self, html: str) -> list[str]:
        """Return the absolute result URLs found in *html*."""
        ...


class SelectorExtractor(ResultExtractor):
    """Extracts ``href`` values of anchors matching a CSS selector.

    Links are kept only when absolute ``http(s)``, not on an excluded host and
    not matching one of the redirect-tracking markers.
    """

    def __init__(
        self,
        selector: str,
        *,
        excluded_hosts: tuple[str, ...] = (),
        redirect_markers: tuple[str, ...] = (),
    ) -> None:
        self.selector = selector
        self.excluded_hosts = excluded_hosts
        self.redirect_markers = redirect_markers

    def extract(self, html: str) -> list[str]:
        soup = BeautifulSoup(html, "html.parser")
        links: list[str] = []
        for anchor in soup.select(self.selector):
            href = anchor.get("href")
            if not isinstance(href, str):
                continue
            href = self.resolve_href(href.strip())
            if self._keep(href):
                links.append(href)
        return links

    def resolve_href(self, href: str) -> str:
        """Hook for engines that wrap result links; identity by default."""
        return href

    def _keep(self, href: str) -> bool:
        if not href.startswith(("http://", "https://")):
            return False
        if any(marker in href for marker in self.redirect_markers):
            return False
        try:
            host = (urlsplit(href).hostname or "").removeprefix("www.")
        except ValueError:
            return False
        return not is_excluded(host, self.excluded_hosts)


@dataclass(frozen=True)
class EngineProfile:
    """Everything engine-specific about building a query and reading its answer."""

    engine: SearchEngine
    base_url: str
    build_params: ParamsBuilder
    block_markers: tuple[str, ...]
    excluded_hosts: tuple[str, ...]
    extractor: ResultExtractor

    def is_blocked(self, body: str) -> bool:
        """Case-insensitive check for bot-detection markers."""
        lowered = body.lower()
        return any(marker in lowered for marker in self.block_markers)
