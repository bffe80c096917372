"""Retry coordinator — bounded retries with proxy rotation and exponential backoff.

State machine per task::

    Attempting(k) ──success──────────────────────────► Success
         │
         ├─soft failure, k < max_retries──► Retrying(k+1)   (new proxy, sleep)
         │
         └─soft failure, k == max_retries, or empty pool──► Exhausted

Proxies are unreliable, interchangeable and disposable: no single proxy
failure is fatal, only running out of retries is, and even that only ends the
one task (it contributes zero domains).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from dorkscan.models.tasks import AttemptStatus, SearchTask, TaskResult, TaskState
from dorkscan.proxy.pool import ProxyPool
from dorkscan.proxy.types import ProxyEndpoint
from dorkscan.services.result_sink import ResultSink
from dorkscan.services.search_executor import SearchExecutor

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


def backoff_delay(attempt: int, base_seconds: float = 1.0) -> float:
    """Delay before attempt ``attempt + 1``: ``base * 2**attempt``."""
    return base_seconds * (2 ** attempt)


class RetryCoordinator:
    """Wraps :class:`SearchExecutor` with the per-task retry policy.

    Parameters
    ----------
    executor:
        Performs single attempts.
    pool:
        Validated proxies to rotate through on retry.
    sink:
        Shared result set; every domain of a successful attempt lands here.
    backoff_base_seconds:
        Base of the exponential backoff (``0`` disables sleeping).
    retry_on_empty:
        When False, a clean empty result page ends the task without retrying.
    sleep:
        Awaitable sleep, injectable for tests.
    """

    def __init__(
        self,
        *,
        executor: SearchExecutor,
        pool: ProxyPool,
        sink: ResultSink,
        backoff_base_seconds: float = 1.0,
        retry_on_empty: bool = True,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._executor = executor
        self._pool = pool
        self._sink = sink
        self._backoff_base = backoff_base_seconds
        self._retry_on_empty = retry_on_empty
        self._sleep = sleep

    async def run(
        self,
        task: SearchTask,
        initial_proxy: ProxyEndpoint,
        max_retries: int,
    ) -> tuple[str, ...]:
        """Drive *task* to Success or Exhausted and return the domains it found."""
        result = await self.run_task(task, initial_proxy, max_retries)
        return result.domains

    async def run_task(
        self,
        task: SearchTask,
        initial_proxy: ProxyEndpoint,
        max_retries: int,
    ) -> TaskResult:
        """Like :meth:`run`, but report the terminal state and attempt count too."""
        proxy = initial_proxy
        attempts = 0

        for attempt in range(max_retries + 1):
            attempts = attempt + 1
            outcome = await self._executor.execute(
                task.engine, task.dork, task.page_index, proxy
            )

            if outcome.status is AttemptStatus.SUCCESS:
                added = self._sink.add_all(outcome.domains)
                logger.info(
                    "Dork '%s', engine '%s', page %d succeeded on attempt %d (%d new domains)",
                    task.dork,
                    task.engine.value,
                    task.page_number,
                    attempts,
                    added,
                )
                return TaskResult(TaskState.SUCCESS, outcome.domains, attempts)

            if outcome.status is AttemptStatus.EMPTY and not self._retry_on_empty:
                return TaskResult(TaskState.SUCCESS, (), attempts)

            if attempt >= max_retries:
                break

            if not self._pool:
                logger.error(
                    "No valid proxies left for retry of dork '%s' on %s",
                    task.dork,
                    task.engine.value,
                )
                break

            failed_proxy = proxy
            proxy = self._pool.choose(exclude=failed_proxy)
            delay = backoff_delay(attempt, self._backoff_base)
            logger.warning(
                "Dork '%s', engine '%s', page %d %s via %s; retrying with %s in %.1fs",
                task.dork,
                task.engine.value,
                task.page_number,
                outcome.status.value,
                failed_proxy.address,
                proxy.address,
                delay,
                extra={
                    "engine": task.engine.value,
                    "dork": task.dork,
                    "page": task.page_number,
                    "attempt": attempts,
                    "proxy_used": failed_proxy.address,
                    "next_proxy": proxy.address,
                    "error_reason": outcome.reason,
                },
            )
            await self._sleep(delay)

        logger.warning(
            "Giving up on dork '%s', engine '%s', page %d after %d attempts",
            task.dork,
            task.engine.value,
            task.page_number,
            attempts,
            extra={"attempt": attempts, "error_reason": "retries exhausted"},
        )
        return TaskResult(TaskState.EXHAUSTED, (), attempts)
