"""Task scheduler — fans the dork × engine × page cross product out under a global cap.

Every combination becomes an independent asyncio task. A task holds one slot
of the concurrency semaphore for its whole lifetime (attempts, backoff and the
trailing jitter), so the semaphore size bounds the number of simultaneous
outbound searches. The scheduler does not interpret results; it waits for
every task and reports totals.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence

from dorkscan.errors import PoolExhaustedError
from dorkscan.fingerprint import FingerprintRandomizer
from dorkscan.models.tasks import SearchEngine, SearchTask, TaskResult, TaskState
from dorkscan.proxy.pool import ProxyPool
from dorkscan.services.retry_coordinator import RetryCoordinator, SleepFn

logger = logging.getLogger(__name__)


def build_tasks(
    dorks: Sequence[str],
    engines: Sequence[SearchEngine],
    pages: int,
) -> list[SearchTask]:
    """Eagerly expand the cross product, dork-major, then engine, then page."""
    return [
        SearchTask(engine=engine, dork=dork, page_index=page)
        for dork in dorks
        for engine in engines
        for page in range(pages)
    ]


class TaskScheduler:
    """Runs every search task through the :class:`RetryCoordinator`.

    Parameters
    ----------
    coordinator:
        Per-task retry policy.
    pool:
        Validated proxies; each task draws its initial proxy here.
    max_concurrency:
        Maximum number of tasks holding a slot at once.
    max_retries:
        Retry budget per task.
    jitter_min_seconds / jitter_max_seconds:
        Randomized pause each task takes after its attempts, before releasing
        its slot. ``0``/``0`` disables it.
    fingerprint:
        Random source for the jitter.
    sleep:
        Awaitable sleep, injectable for tests.
    """

    def __init__(
        self,
        *,
        coordinator: RetryCoordinator,
        pool: ProxyPool,
        max_concurrency: int = 500,
        max_retries: int = 3,
        jitter_min_seconds: float = 1.0,
        jitter_max_seconds: float = 2.0,
        fingerprint: FingerprintRandomizer | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._coordinator = coordinator
        self._pool = pool
        self._max_concurrency = max_concurrency
        self._max_retries = max_retries
        self._jitter_min = jitter_min_seconds
        self._jitter_max = jitter_max_seconds
        self._fingerprint = fingerprint or FingerprintRandomizer()
        self._sleep = sleep

        self._in_flight = 0
        self._peak_in_flight = 0
        self._succeeded = 0
        self._exhausted = 0
        self._total = 0
        self._total_duration_ms = 0.0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(
        self,
        dorks: Sequence[str],
        engines: Sequence[SearchEngine],
        pages: int,
    ) -> list[TaskResult]:
        """Schedule every (dork, engine, page) combination and wait for all of them.

        Returns one :class:`TaskResult` per task, in task order.

        Raises
        ------
        PoolExhaustedError
            If the proxy pool is empty; no task is started.
        """
        if not self._pool:
            raise PoolExhaustedError("Cannot schedule searches without validated proxies")

        tasks = build_tasks(dorks, engines, pages)
        self._total = len(tasks)
        semaphore = asyncio.Semaphore(self._max_concurrency)

        logger.info(
            "Scheduling %d tasks (%d dorks x %d engines x %d pages, concurrency=%d)",
            len(tasks),
            len(dorks),
            len(engines),
            pages,
            self._max_concurrency,
        )

        results = await asyncio.gather(
            *(self._run_one(task, semaphore) for task in tasks)
        )
        logger.info(
            "All %d tasks finished (%d succeeded, %d exhausted)",
            len(tasks),
            self._succeeded,
            self._exhausted,
        )
        return list(results)

    def get_stats(self) -> dict:
        """Return current scheduler statistics."""
        finished = self._succeeded + self._exhausted
        avg_ms = self._total_duration_ms / finished if finished else 0.0
        return {
            "tasks_total": self._total,
            "in_flight": self._in_flight,
            "peak_in_flight": self._peak_in_flight,
            "succeeded": self._succeeded,
            "exhausted": self._exhausted,
            "avg_duration_ms": round(avg_ms, 2),
        }

    # ------------------------------------------------------------------
    # Per-task worker
    # ------------------------------------------------------------------

    async def _run_one(self, task: SearchTask, semaphore: asyncio.Semaphore) -> TaskResult:
        async with semaphore:
            self._in_flight += 1
            self._peak_in_flight = max(self._peak_in_flight, self._in_flight)
            start_time = time.monotonic()
            try:
                result = await self._attempt(task)
                if result.state is TaskState.SUCCESS:
                    self._succeeded += 1
                else:
                    self._exhausted += 1

                delay = self._fingerprint.get_action_delay(self._jitter_min, self._jitter_max)
                if delay > 0:
                    await self._sleep(delay)
            finally:
                self._total_duration_ms += (time.monotonic() - start_time) * 1000
                self._in_flight -= 1

        return result

    async def _attempt(self, task: SearchTask) -> TaskResult:
        """Run one task's retry sequence; a crash counts as exhaustion."""
        try:
            proxy = self._pool.choose()
            return await self._coordinator.run_task(task, proxy, self._max_retries)
        except Exception as exc:
            logger.error(
                "Task for dork '%s' on %s page %d crashed: %s",
                task.dork,
                task.engine.value,
                task.page_number,
                exc,
                exc_info=True,
            )
            return TaskResult(TaskState.EXHAUSTED)
