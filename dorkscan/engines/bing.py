"""Bing web search profile."""

from __future__ import annotations

from dorkscan.engines.base import EngineProfile, SelectorExtractor
from dorkscan.models.tasks import SearchEngine

EXCLUDED_HOSTS = ("bing.com", "bing.net")


def build_params(dork: str, page: int) -> dict[str, str]:
    # Bing's result offset is one-based
    return {"q": dork, "first": str(page * 10 + 1)}


PROFILE = EngineProfile(
    engine=SearchEngine.BING,
    base_url="https://www.bing.com/search",
    build_params=build_params,
    block_markers=("unusual traffic", "captcha"),
    excluded_hosts=EXCLUDED_HOSTS,
    extractor=SelectorExtractor(
        "li.b_algo a",
        excluded_hosts=EXCLUDED_HOSTS,
        redirect_markers=("bing.com/ck/a",),
    ),
)
