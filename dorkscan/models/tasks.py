"""Units of work, per-attempt outcomes and run totals."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class SearchEngine(str, Enum):
    """Supported search engines."""

    GOOGLE = "google"
    BING = "bing"
    DUCKDUCKGO = "duckduckgo"


@dataclass(frozen=True)
class SearchTask:
    """One (engine, dork, page) unit of work. ``page_index`` is zero-based."""

    engine: SearchEngine
    dork: str
    page_index: int

    @property
    def page_number(self) -> int:
        """One-based page number for display."""
        return self.page_index + 1


class AttemptStatus(str, Enum):
    """Classification of a single fetch-and-extract attempt."""

    SUCCESS = "success"
    EMPTY = "empty"      # 200, not blocked, nothing extracted
    FAILED = "failed"    # transport error or non-200
    BLOCKED = "blocked"  # bot / CAPTCHA markers in the body


@dataclass(frozen=True)
class AttemptOutcome:
    """Result of one SearchExecutor attempt."""

    status: AttemptStatus
    domains: tuple[str, ...] = ()
    reason: str | None = None

    @property
    def is_soft_failure(self) -> bool:
        return self.status is not AttemptStatus.SUCCESS


class TaskState(str, Enum):
    """Terminal state of a task's retry sequence."""

    SUCCESS = "success"
    EXHAUSTED = "exhausted"


@dataclass
class RunSummary:
    """Totals reported at the end of a run."""

    dorks: int = 0
    pages_per_dork: int = 0
    engines: list[str] = field(default_factory=list)
    tasks_scheduled: int = 0
    tasks_succeeded: int = 0
    tasks_exhausted: int = 0
    valid_proxies: int = 0
    unique_domains: int = 0
    peak_in_flight: int = 0


@dataclass(frozen=True)
class TaskResult:
    """How a task's retry sequence ended."""

    state: TaskState
    domains: tuple[str, ...] = ()
    attempts: int = 0
