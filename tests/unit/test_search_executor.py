"""Unit tests for single search attempts."""

from __future__ import annotations

import threading

import httpx
import pytest

from dorkscan.models.tasks import AttemptStatus, SearchEngine
from dorkscan.services.search_executor import SearchExecutor
from helpers import html_response, make_endpoint

RESULTS_HTML = """
<div class="yuRUbf"><a href="https://www.alpha.com/a">A</a></div>
<div class="yuRUbf"><a href="https://beta.org/b">B</a></div>
<div class="yuRUbf"><a href="https://alpha.com/other">A again</a></div>
"""


@pytest.fixture
def executor(fingerprint) -> SearchExecutor:
    return SearchExecutor(fingerprint=fingerprint)


class TestExecute:
    """Test SearchExecutor.execute() classification."""

    @pytest.mark.asyncio
    async def test_success_returns_normalized_domains(self, executor: SearchExecutor) -> None:
        proxy = make_endpoint(handler=lambda _p, _r: html_response(RESULTS_HTML))
        outcome = await executor.execute(SearchEngine.GOOGLE, "inurl:shop", 0, proxy)
        assert outcome.status is AttemptStatus.SUCCESS
        assert outcome.domains == ("alpha.com", "beta.org")
        assert not outcome.is_soft_failure

    @pytest.mark.asyncio
    async def test_request_carries_query_and_user_agent(self, executor: SearchExecutor) -> None:
        captured: list[httpx.Request] = []

        def handler(_proxy: str, request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return html_response(RESULTS_HTML)

        await executor.execute(SearchEngine.GOOGLE, "site:example.com", 2, make_endpoint(handler=handler))

        request = captured[0]
        assert request.url.host == "www.google.com"
        assert request.url.path == "/search"
        assert request.url.params["q"] == "site:example.com"
        assert request.url.params["start"] == "20"
        assert request.headers["User-Agent"].startswith("Mozilla/5.0")

    @pytest.mark.asyncio
    async def test_each_engine_hits_its_own_endpoint(self, executor: SearchExecutor) -> None:
        hosts: list[str] = []

        def handler(_proxy: str, request: httpx.Request) -> httpx.Response:
            hosts.append(request.url.host)
            return html_response("")

        proxy = make_endpoint(handler=handler)
        for engine in SearchEngine:
            await executor.execute(engine, "x", 0, proxy)
        assert hosts == ["www.google.com", "www.bing.com", "duckduckgo.com"]

    @pytest.mark.asyncio
    async def test_transport_error_is_failed(self, executor: SearchExecutor) -> None:
        def handler(_proxy: str, request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        outcome = await executor.execute(SearchEngine.BING, "x", 0, make_endpoint(handler=handler))
        assert outcome.status is AttemptStatus.FAILED
        assert outcome.reason == "timed out"
        assert outcome.domains == ()

    @pytest.mark.asyncio
    async def test_non_200_is_failed(self, executor: SearchExecutor) -> None:
        proxy = make_endpoint(handler=lambda _p, _r: html_response(RESULTS_HTML, status_code=429))
        outcome = await executor.execute(SearchEngine.GOOGLE, "x", 0, proxy)
        assert outcome.status is AttemptStatus.FAILED
        assert outcome.reason == "HTTP 429"

    @pytest.mark.asyncio
    async def test_captcha_body_is_blocked(self, executor: SearchExecutor) -> None:
        body = "<html><body>Please solve this CAPTCHA</body></html>" + RESULTS_HTML
        proxy = make_endpoint(handler=lambda _p, _r: html_response(body))
        outcome = await executor.execute(SearchEngine.GOOGLE, "x", 0, proxy)
        assert outcome.status is AttemptStatus.BLOCKED
        assert outcome.domains == ()

    @pytest.mark.asyncio
    async def test_empty_page_is_empty(self, executor: SearchExecutor) -> None:
        proxy = make_endpoint(handler=lambda _p, _r: html_response("<html><body>No results</body></html>"))
        outcome = await executor.execute(SearchEngine.GOOGLE, "x", 0, proxy)
        assert outcome.status is AttemptStatus.EMPTY
        assert outcome.is_soft_failure

    @pytest.mark.asyncio
    async def test_regex_fallback_when_selectors_miss(self, executor: SearchExecutor) -> None:
        body = (
            '<html xmlns="http://www.w3.org/1999/xhtml"><body>'
            '<span>see https://www.fallback.net/page and "https://maps.google.com/x"</span>'
            "</body></html>"
        )
        proxy = make_endpoint(handler=lambda _p, _r: html_response(body))
        outcome = await executor.execute(SearchEngine.GOOGLE, "x", 0, proxy)
        assert outcome.status is AttemptStatus.SUCCESS
        assert outcome.domains == ("fallback.net",)

    @pytest.mark.asyncio
    async def test_regex_fallback_keeps_only_the_host(self, executor: SearchExecutor) -> None:
        body = (
            "<script>var u='http://evil.com';x=\"http://a.com&amp;b=1\";</script>"
            " (http://paren.org) http://x.org',"
        )
        proxy = make_endpoint(handler=lambda _p, _r: html_response(body))
        outcome = await executor.execute(SearchEngine.GOOGLE, "x", 0, proxy)
        assert outcome.status is AttemptStatus.SUCCESS
        assert outcome.domains == ("evil.com", "a.com", "paren.org", "x.org")

    @pytest.mark.asyncio
    async def test_page_parsing_runs_off_the_event_loop_thread(
        self, executor: SearchExecutor, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        parse_threads: list[int] = []
        original = SearchExecutor.extract_domains

        def recording(profile, html):
            parse_threads.append(threading.get_ident())
            return original(profile, html)

        monkeypatch.setattr(SearchExecutor, "extract_domains", staticmethod(recording))
        proxy = make_endpoint(handler=lambda _p, _r: html_response(RESULTS_HTML))
        outcome = await executor.execute(SearchEngine.GOOGLE, "inurl:shop", 0, proxy)

        assert outcome.domains == ("alpha.com", "beta.org")
        assert parse_threads and parse_threads[0] != threading.get_ident()
