"""Run-level error hierarchy.

All dorkscan-specific errors extend DorkscanError. Per-attempt search failures
are not exceptions (see ``AttemptOutcome``); only conditions that stop the run
early, or indicate a programming error, are raised. ``main()`` catches
DorkscanError once and turns it into a diagnostic plus a non-zero exit code.
"""

from __future__ import annotations


class DorkscanError(Exception):
    """Base error for all dorkscan-specific errors."""

    exit_code: int = 1
    message: str = "Unexpected dorkscan error"

    def __init__(self, message: str | None = None, **kwargs: object) -> None:
        self.message = message or self.__class__.message
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(DorkscanError):
    """Missing or empty required input, or invalid settings."""

    message = "Invalid configuration"


class PoolExhaustedError(DorkscanError):
    """No validated proxies available to route searches through."""

    message = "No validated proxies available"


class ProxyAlreadyQualifiedError(DorkscanError):
    """A validated proxy endpoint was scheme-qualified a second time."""

    message = "Proxy endpoint already has a scheme-qualified URL"
