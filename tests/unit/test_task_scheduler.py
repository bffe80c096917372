"""Unit tests for the task scheduler."""

from __future__ import annotations

import asyncio

import pytest

from dorkscan.errors import PoolExhaustedError
from dorkscan.models.tasks import SearchEngine, SearchTask, TaskResult, TaskState
from dorkscan.proxy.pool import ProxyPool
from dorkscan.services.task_scheduler import TaskScheduler, build_tasks
from helpers import RecordingSleep, no_sleep


class FakeCoordinator:
    """Coordinator stand-in that records tasks and tracks concurrent calls."""

    def __init__(self, delay: float = 0.0, fail_dorks: frozenset[str] = frozenset()) -> None:
        self.delay = delay
        self.fail_dorks = fail_dorks
        self.tasks: list[SearchTask] = []
        self.retry_budgets: list[int] = []
        self.active = 0
        self.peak = 0

    async def run_task(self, task, initial_proxy, max_retries) -> TaskResult:
        self.tasks.append(task)
        self.retry_budgets.append(max_retries)
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(self.delay)
            if task.dork in self.fail_dorks:
                return TaskResult(TaskState.EXHAUSTED, attempts=max_retries + 1)
            return TaskResult(TaskState.SUCCESS, (f"{task.dork}.com",), 1)
        finally:
            self.active -= 1


class CrashingCoordinator:
    async def run_task(self, task, initial_proxy, max_retries) -> TaskResult:
        raise RuntimeError("boom")


def _scheduler(coordinator, pool: ProxyPool, **kwargs) -> TaskScheduler:
    kwargs.setdefault("jitter_min_seconds", 0)
    kwargs.setdefault("jitter_max_seconds", 0)
    kwargs.setdefault("sleep", no_sleep)
    return TaskScheduler(coordinator=coordinator, pool=pool, **kwargs)


class TestBuildTasks:
    def test_cross_product_order(self) -> None:
        tasks = build_tasks(["a", "b"], [SearchEngine.GOOGLE, SearchEngine.BING], 2)
        assert [(t.dork, t.engine, t.page_index) for t in tasks] == [
            ("a", SearchEngine.GOOGLE, 0),
            ("a", SearchEngine.GOOGLE, 1),
            ("a", SearchEngine.BING, 0),
            ("a", SearchEngine.BING, 1),
            ("b", SearchEngine.GOOGLE, 0),
            ("b", SearchEngine.GOOGLE, 1),
            ("b", SearchEngine.BING, 0),
            ("b", SearchEngine.BING, 1),
        ]

    def test_page_number_is_one_based(self) -> None:
        assert build_tasks(["a"], [SearchEngine.GOOGLE], 3)[-1].page_number == 3

    def test_no_dorks_no_tasks(self) -> None:
        assert build_tasks([], [SearchEngine.GOOGLE], 5) == []


class TestTaskScheduler:
    """Test TaskScheduler.run()."""

    @pytest.mark.asyncio
    async def test_runs_every_task_once(self, pool: ProxyPool) -> None:
        coordinator = FakeCoordinator()
        scheduler = _scheduler(coordinator, pool, max_retries=2)

        results = await scheduler.run(["x", "y"], [SearchEngine.GOOGLE], 2)

        assert len(results) == 4
        assert sorted((t.dork, t.page_index) for t in coordinator.tasks) == [
            ("x", 0), ("x", 1), ("y", 0), ("y", 1),
        ]
        assert coordinator.retry_budgets == [2, 2, 2, 2]

    @pytest.mark.asyncio
    async def test_concurrency_cap_is_respected(self, pool: ProxyPool) -> None:
        coordinator = FakeCoordinator(delay=0.01)
        scheduler = _scheduler(coordinator, pool, max_concurrency=3)

        await scheduler.run([f"d{i}" for i in range(10)], [SearchEngine.GOOGLE], 2)

        assert coordinator.peak <= 3
        stats = scheduler.get_stats()
        assert stats["peak_in_flight"] <= 3
        assert stats["in_flight"] == 0

    @pytest.mark.asyncio
    async def test_counts_success_and_exhaustion(self, pool: ProxyPool) -> None:
        coordinator = FakeCoordinator(fail_dorks=frozenset({"bad"}))
        scheduler = _scheduler(coordinator, pool)

        results = await scheduler.run(["good", "bad"], [SearchEngine.GOOGLE, SearchEngine.BING], 1)

        assert [r.state for r in results] == [
            TaskState.SUCCESS,
            TaskState.SUCCESS,
            TaskState.EXHAUSTED,
            TaskState.EXHAUSTED,
        ]
        stats = scheduler.get_stats()
        assert stats["tasks_total"] == 4
        assert stats["succeeded"] == 2
        assert stats["exhausted"] == 2

    @pytest.mark.asyncio
    async def test_crashing_task_does_not_abort_run(self, pool: ProxyPool) -> None:
        scheduler = _scheduler(CrashingCoordinator(), pool)
        results = await scheduler.run(["a", "b"], [SearchEngine.GOOGLE], 1)
        assert [r.state for r in results] == [TaskState.EXHAUSTED, TaskState.EXHAUSTED]
        assert scheduler.get_stats()["in_flight"] == 0

    @pytest.mark.asyncio
    async def test_empty_pool_raises_before_scheduling(self) -> None:
        coordinator = FakeCoordinator()
        with pytest.raises(PoolExhaustedError):
            await _scheduler(coordinator, ProxyPool([])).run(["a"], [SearchEngine.GOOGLE], 1)
        assert coordinator.tasks == []

    @pytest.mark.asyncio
    async def test_jitter_sleeps_once_per_task(self, pool: ProxyPool, fingerprint) -> None:
        sleep = RecordingSleep()
        scheduler = _scheduler(
            FakeCoordinator(),
            pool,
            jitter_min_seconds=1.0,
            jitter_max_seconds=2.0,
            fingerprint=fingerprint,
            sleep=sleep,
        )

        await scheduler.run(["a", "b", "c"], [SearchEngine.GOOGLE], 1)

        assert len(sleep.delays) == 3
        assert all(1.0 <= delay <= 2.0 for delay in sleep.delays)

    @pytest.mark.asyncio
    async def test_zero_jitter_never_sleeps(self, pool: ProxyPool) -> None:
        sleep = RecordingSleep()
        await _scheduler(FakeCoordinator(), pool, sleep=sleep).run(["a"], [SearchEngine.GOOGLE], 3)
        assert sleep.delays == []
