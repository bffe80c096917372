"""Shared test fixtures for the dorkscan test suite."""

from __future__ import annotations

import os
import random

import pytest

from dorkscan.fingerprint import FingerprintRandomizer
from dorkscan.proxy.pool import ProxyPool
from dorkscan.services.result_sink import ResultSink
from helpers import make_endpoint


# ---------------------------------------------------------------------------
# Keep the environment from leaking DORKSCAN_* values into tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clear_dorkscan_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove DORKSCAN_ env vars so settings defaults are predictable."""
    for key in list(os.environ):
        if key.startswith("DORKSCAN_"):
            monkeypatch.delenv(key)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fingerprint() -> FingerprintRandomizer:
    return FingerprintRandomizer(rng=random.Random(1234))


@pytest.fixture
def sink() -> ResultSink:
    return ResultSink()


@pytest.fixture
def pool() -> ProxyPool:
    endpoints = [make_endpoint(host=f"10.0.0.{i}") for i in range(1, 4)]
    return ProxyPool(endpoints, rng=random.Random(42))
