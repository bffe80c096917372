"""Logging configuration.

Two output modes:

- console (default): ``rich.logging.RichHandler`` with severity-coloured levels.
- JSON: one JSON object per line with timestamp, level, logger and message,
  plus the structured fields attached to search log calls via ``extra``
  (engine, dork, page, proxy_used, next_proxy, attempt, error_reason,
  domains_found).

SECURITY: proxy credentials are redacted in both modes.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone

from rich.console import Console
from rich.logging import RichHandler


# Patterns that should be redacted from log output
_SENSITIVE_PATTERNS = re.compile(
    r"(password|passwd|secret|token|authorization)[\s]*[=:]\s*\S+",
    re.IGNORECASE,
)

# user:pass@ inside URLs or raw proxy lines
_URL_CREDENTIALS = re.compile(r"(?P<prefix>(?:[a-z][a-z0-9+.-]*://)?)[^\s:@/]+:[^\s@/]+@", re.IGNORECASE)

_EXTRA_FIELDS = (
    "engine",
    "dork",
    "page",
    "proxy_used",
    "next_proxy",
    "attempt",
    "error_reason",
    "domains_found",
)


def sanitize(text: str) -> str:
    """Remove credentials and other sensitive values from log text."""
    text = _URL_CREDENTIALS.sub(r"\g<prefix>[REDACTED]@", text)
    return _SENSITIVE_PATTERNS.sub("[REDACTED]", text)


class JsonFormatter(logging.Formatter):
    """Formats log records as JSON with structured fields.

    Each entry contains at minimum: timestamp, level, logger, message.
    Additional fields can be attached via the ``extra`` dict on log calls.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize(record.getMessage()),
        }

        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                value = getattr(record, name)
                entry[name] = sanitize(value) if isinstance(value, str) else value

        # Exception info
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = sanitize(self.formatException(record.exc_info))

        return json.dumps(entry, default=str)


class RedactingRichHandler(RichHandler):
    """RichHandler that scrubs credentials before rendering."""

    def emit(self, record: logging.LogRecord) -> None:
        record.msg = sanitize(record.getMessage())
        record.args = None
        super().emit(record)


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level:
        Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    json_format:
        Emit JSON lines instead of coloured console output.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    root.handlers.clear()

    handler: logging.Handler
    if json_format:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
    else:
        handler = RedactingRichHandler(
            console=Console(stderr=True),
            show_path=False,
            markup=False,
            rich_tracebacks=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)

    # httpx logs every request at INFO; keep the run output readable
    logging.getLogger("httpx").setLevel(logging.WARNING)
