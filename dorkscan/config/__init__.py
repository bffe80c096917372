"""Configuration module — run settings."""

from dorkscan.config.settings import DorkscanSettings, load_settings

__all__ = [
    "DorkscanSettings",
    "load_settings",
]
