"""DuckDuckGo HTML-endpoint search profile.

The HTML endpoint wraps every result in a ``//duckduckgo.com/l/?uddg=<url>``
redirect; the extractor unwraps it back to the target URL.
"""

from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

from dorkscan.engines.base import EngineProfile, SelectorExtractor
from dorkscan.models.tasks import SearchEngine

EXCLUDED_HOSTS = ("duckduckgo.com",)


def build_params(dork: str, page: int) -> dict[str, str]:
    return {"q": dork, "s": str(page * 30)}


class DuckDuckGoExtractor(SelectorExtractor):
    """Selector extractor that unwraps DuckDuckGo redirect links."""

    def resolve_href(self, href: str) -> str:
        if href.startswith("//"):
            href = "https:" + href
        try:
            parts = urlsplit(href)
        except ValueError:
            return href
        if (parts.hostname or "").endswith("duckduckgo.com") and parts.path.startswith("/l/"):
            target = parse_qs(parts.query).get("uddg")
            if target:
                return target[0]
        return href


PROFILE = EngineProfile(
    engine=SearchEngine.DUCKDUCKGO,
    base_url="https://duckduckgo.com/html/",
    build_params=build_params,
    block_markers=("robot check", "captcha"),
    excluded_hosts=EXCLUDED_HOSTS,
    extractor=DuckDuckGoExtractor("a.result__a", excluded_hosts=EXCLUDED_HOSTS),
)
