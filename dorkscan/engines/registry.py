"""Pluggable engine registry.

Maps ``SearchEngine`` → ``EngineProfile``. Adding an engine requires only a
profile module and a ``register()`` call; the executor is untouched.
"""

from __future__ import annotations

import logging

from dorkscan.engines import bing, duckduckgo, google
from dorkscan.engines.base import EngineProfile
from dorkscan.models.tasks import SearchEngine

logger = logging.getLogger(__name__)

DEFAULT_ENGINE = SearchEngine.GOOGLE


class EngineRegistry:
    """Registry that maps engines to their profiles."""

    def __init__(self) -> None:
        self._profiles: dict[SearchEngine, EngineProfile] = {}

    def register(self, profile: EngineProfile) -> None:
        """Register a profile for its declared ``engine``.

        Raises
        ------
        ValueError
            If a profile for the same engine is already registered.
        """
        engine = profile.engine
        if engine in self._profiles:
            raise ValueError(f"Profile for engine '{engine.value}' is already registered")
        self._profiles[engine] = profile
        logger.debug("Registered profile for engine '%s'", engine.value)

    def get(self, engine: SearchEngine) -> EngineProfile:
        """Return the profile for *engine*.

        Raises
        ------
        KeyError
            If no profile is registered for the given engine.
        """
        try:
            return self._profiles[engine]
        except KeyError:
            raise KeyError(f"No profile registered for engine '{engine.value}'") from None

    def list_engines(self) -> list[SearchEngine]:
        """Return all registered engines."""
        return list(self._profiles.keys())


def default_registry() -> EngineRegistry:
    """Registry with Google, Bing and DuckDuckGo."""
    registry = EngineRegistry()
    registry.register(google.PROFILE)
    registry.register(bing.PROFILE)
    registry.register(duckduckgo.PROFILE)
    return registry


def resolve_engines(selection: str | None, registry: EngineRegistry | None = None) -> list[SearchEngine]:
    """Turn a comma-separated engine selection into engines.

    Names are trimmed and lower-cased; unknown or unregistered names are
    dropped with a warning; duplicates are removed keeping first occurrence.
    An empty result falls back to Google.
    """
    available = set(registry.list_engines()) if registry else set(SearchEngine)
    engines: list[SearchEngine] = []
    for name in (selection or "").split(","):
        name = name.strip().lower()
        if not name:
            continue
        try:
            engine = SearchEngine(name)
        except ValueError:
            logger.warning("Unsupported search engine ignored: %s", name)
            continue
        if engine not in available:
            logger.warning("Search engine not registered, ignored: %s", name)
            continue
        if engine not in engines:
            engines.append(engine)

    if not engines:
        engines.append(DEFAULT_ENGINE)
    return engines
