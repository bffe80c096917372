"""Search engine profiles — query builders, block markers and result extractors."""

from dorkscan.engines.base import EngineProfile, ResultExtractor, SelectorExtractor
from dorkscan.engines.registry import EngineRegistry, default_registry, resolve_engines

__all__ = [
    "EngineProfile",
    "EngineRegistry",
    "ResultExtractor",
    "SelectorExtractor",
    "default_registry",
    "resolve_engines",
]
