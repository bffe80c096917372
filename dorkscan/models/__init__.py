"""Data models: tasks, attempt outcomes and domain normalization."""

from dorkscan.models.domain import extract_domain, is_valid_domain, normalize_domains
from dorkscan.models.tasks import (
    AttemptOutcome,
    AttemptStatus,
    RunSummary,
    SearchEngine,
    SearchTask,
    TaskResult,
    TaskState,
)

__all__ = [
    "AttemptOutcome",
    "AttemptStatus",
    "RunSummary",
    "SearchEngine",
    "SearchTask",
    "TaskResult",
    "TaskState",
    "extract_domain",
    "is_valid_domain",
    "normalize_domains",
]
