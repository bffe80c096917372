"""Command line entry point and run wiring.

Run phases: load dorks (fatal if missing/empty) → resolve engines → load and
validate proxies (fatal if none survive) → schedule every search task → append
the deduplicated domains to the output file → log the summary.
"""

from __future__ import annotations

import argparse
import asyncio
import functools
import logging
import sys
from collections.abc import Sequence

from dorkscan import __version__
from dorkscan.config.settings import DorkscanSettings, load_settings
from dorkscan.engines.registry import EngineRegistry, default_registry, resolve_engines
from dorkscan.errors import DorkscanError, PoolExhaustedError
from dorkscan.fingerprint import FingerprintRandomizer
from dorkscan.inputs import append_results, load_dorks, load_proxies
from dorkscan.logging_config import configure_logging
from dorkscan.models.tasks import RunSummary
from dorkscan.proxy.types import ClientFactory, build_proxy_client
from dorkscan.proxy.validator import ProxyValidator
from dorkscan.services.result_sink import ResultSink
from dorkscan.services.retry_coordinator import RetryCoordinator, SleepFn
from dorkscan.services.search_executor import SearchExecutor
from dorkscan.services.task_scheduler import TaskScheduler

logger = logging.getLogger(__name__)


async def run(
    settings: DorkscanSettings,
    *,
    client_factory: ClientFactory | None = None,
    registry: EngineRegistry | None = None,
    fingerprint: FingerprintRandomizer | None = None,
    sleep: SleepFn = asyncio.sleep,
) -> RunSummary:
    """Execute one complete run described by *settings*.

    Raises
    ------
    ConfigurationError
        Missing or empty dork file; raised before any network activity.
    PoolExhaustedError
        No proxies loaded, or none survived validation.
    """
    dorks = load_dorks(settings.dork_file)

    registry = registry or default_registry()
    engines = resolve_engines(settings.engines, registry)
    fingerprint = fingerprint or FingerprintRandomizer()

    logger.info(
        "Starting search for %d dorks with %d pages each on %s using rotating proxies",
        len(dorks),
        settings.pages,
        ", ".join(engine.value for engine in engines),
    )

    factory = client_factory or functools.partial(
        build_proxy_client, timeout_seconds=settings.request_timeout_seconds
    )
    proxies = load_proxies(settings.proxy_file, factory)
    if not proxies:
        raise PoolExhaustedError(
            f"No proxies loaded; make sure '{settings.proxy_file}' lists valid proxies"
        )

    validator = ProxyValidator(
        concurrency=settings.validation_concurrency,
        timeout_seconds=settings.probe_timeout_seconds,
        http_probe_url=settings.probe_http_url,
        https_probe_url=settings.probe_https_url,
        fingerprint=fingerprint,
    )
    pool = await validator.validate(proxies)

    sink = ResultSink()
    try:
        coordinator = RetryCoordinator(
            executor=SearchExecutor(registry=registry, fingerprint=fingerprint),
            pool=pool,
            sink=sink,
            backoff_base_seconds=settings.backoff_base_seconds,
            retry_on_empty=settings.retry_on_empty,
            sleep=sleep,
        )
        scheduler = TaskScheduler(
            coordinator=coordinator,
            pool=pool,
            max_concurrency=settings.max_concurrency,
            max_retries=settings.max_retries,
            jitter_min_seconds=settings.jitter_min_seconds,
            jitter_max_seconds=settings.jitter_max_seconds,
            fingerprint=fingerprint,
            sleep=sleep,
        )
        await scheduler.run(dorks, engines, settings.pages)
    finally:
        await pool.aclose()

    append_results(settings.output_file, sink.snapshot())

    stats = scheduler.get_stats()
    summary = RunSummary(
        dorks=len(dorks),
        pages_per_dork=settings.pages,
        engines=[engine.value for engine in engines],
        tasks_scheduled=stats["tasks_total"],
        tasks_succeeded=stats["succeeded"],
        tasks_exhausted=stats["exhausted"],
        valid_proxies=len(pool),
        unique_domains=len(sink),
        peak_in_flight=stats["peak_in_flight"],
    )
    _log_summary(summary)
    return summary


def _log_summary(summary: RunSummary) -> None:
    logger.info("Total dorks: %d", summary.dorks)
    logger.info("Total pages per dork: %d", summary.pages_per_dork)
    logger.info(
        "Tasks: %d scheduled, %d succeeded, %d exhausted",
        summary.tasks_scheduled,
        summary.tasks_succeeded,
        summary.tasks_exhausted,
    )
    logger.info("Valid proxies used: %d", summary.valid_proxies)
    logger.info("Total unique domains: %d", summary.unique_domains)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dorkscan",
        description="Run search dorks through rotating proxies and collect unique result domains.",
    )
    parser.add_argument("-d", "--dorks", dest="dork_file", help="Path to the dork list (one per line)")
    parser.add_argument("-x", "--proxies", dest="proxy_file", help="Path to the proxy list (default: proxy.txt)")
    parser.add_argument("-o", "--output", dest="output_file", help="Output file, appended to (default: results.txt)")
    parser.add_argument(
        "-e",
        "--engines",
        help="Comma-separated engines: google, bing, duckduckgo (default: google)",
    )
    parser.add_argument("-p", "--pages", type=int, help="Pages per dork (default: 1)")
    parser.add_argument("-t", "--threads", dest="max_concurrency", type=int, help="Concurrent searches (default: 500)")
    parser.add_argument("-r", "--retries", dest="max_retries", type=int, help="Max retries per search (default: 3)")
    parser.add_argument("--validation-concurrency", type=int, help="Concurrent proxy probes (default: 200)")
    parser.add_argument("--config", help="YAML file with settings")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR (default: INFO)")
    parser.add_argument("--log-json", action="store_true", default=None, help="Emit JSON log lines")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    overrides = vars(args)
    config_path = overrides.pop("config")

    try:
        settings = load_settings(config_path, **overrides)
    except DorkscanError as exc:
        configure_logging()
        logger.error("%s", exc.message)
        return exc.exit_code

    configure_logging(settings.log_level, json_format=settings.log_json)

    try:
        asyncio.run(run(settings))
    except DorkscanError as exc:
        logger.error("%s", exc.message)
        return exc.exit_code
    except KeyboardInterrupt:
        logger.warning("Interrupted; no results written")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
