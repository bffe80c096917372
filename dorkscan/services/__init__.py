"""Search pipeline services — executor, retry policy, scheduler and result sink."""

from dorkscan.services.result_sink import ResultSink
from dorkscan.services.retry_coordinator import RetryCoordinator, backoff_delay
from dorkscan.services.search_executor import SearchExecutor
from dorkscan.services.task_scheduler import TaskScheduler, build_tasks

__all__ = [
    "ResultSink",
    "RetryCoordinator",
    "SearchExecutor",
    "TaskScheduler",
    "backoff_delay",
    "build_tasks",
]
