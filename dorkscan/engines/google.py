"""Google web search profile."""

from __future__ import annotations

from dorkscan.engines.base import EngineProfile, SelectorExtractor
from dorkscan.models.tasks import SearchEngine

EXCLUDED_HOSTS = (
    "google.com",
    "gstatic.com",
    "googleapis.com",
    "googleusercontent.com",
)


def build_params(dork: str, page: int) -> dict[str, str]:
    return {"q": dork, "start": str(page * 10)}


PROFILE = EngineProfile(
    engine=SearchEngine.GOOGLE,
    base_url="https://www.google.com/search",
    build_params=build_params,
    block_markers=("detected unusual traffic", "captcha"),
    excluded_hosts=EXCLUDED_HOSTS,
    extractor=SelectorExtractor(
        "div.yuRUbf > a",
        excluded_hosts=EXCLUDED_HOSTS,
        redirect_markers=("google.com/url?",),
    ),
)
