"""Pydantic Settings for a dorkscan run.

All environment variables use the DORKSCAN_ prefix.
Example: DORKSCAN_MAX_CONCURRENCY=200, DORKSCAN_ENGINES=google,bing

Values can also come from a YAML mapping (``--config``) and from CLI flags.
Precedence: CLI flags > YAML file > environment > defaults.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings

from dorkscan.errors import ConfigurationError

logger = logging.getLogger(__name__)


class DorkscanSettings(BaseSettings):
    """Run configuration validated from environment variables, YAML and flags."""

    # Inputs / outputs
    dork_file: str | None = None
    proxy_file: str = "proxy.txt"
    output_file: str = "results.txt"

    # Search fan-out
    engines: str = "google"  # comma-separated, see resolve_engines()
    pages: int = Field(default=1, ge=1)

    # Scheduling
    max_concurrency: int = Field(default=500, ge=1)
    max_retries: int = Field(default=3, ge=0)
    backoff_base_seconds: float = Field(default=1.0, ge=0)
    jitter_min_seconds: float = Field(default=1.0, ge=0)
    jitter_max_seconds: float = Field(default=2.0, ge=0)
    retry_on_empty: bool = True
    request_timeout_seconds: float = Field(default=30.0, gt=0)

    # Proxy validation
    validation_concurrency: int = Field(default=200, ge=1)
    probe_timeout_seconds: float = Field(default=30.0, gt=0)
    probe_http_url: str = "http://httpbin.org/ip"
    probe_https_url: str = "https://httpbin.org/ip"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    model_config = {"env_prefix": "DORKSCAN_"}

    @model_validator(mode="after")
    def _check_jitter_range(self) -> DorkscanSettings:
        if self.jitter_max_seconds < self.jitter_min_seconds:
            raise ValueError("jitter_max_seconds must be >= jitter_min_seconds")
        return self


def _read_yaml_config(config_path: str) -> dict:
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Config file '{config_path}' not found")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse config file '{config_path}': {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file '{config_path}' must contain a mapping")
    return raw


def load_settings(config_path: str | None = None, **overrides: object) -> DorkscanSettings:
    """Build settings from environment, an optional YAML file and explicit overrides.

    Overrides whose value is ``None`` are ignored so unset CLI flags do not
    shadow the YAML file or the environment.

    Raises
    ------
    ConfigurationError
        If the YAML file is missing or malformed, or a value fails validation.
    """
    values: dict = {}
    if config_path:
        values.update(_read_yaml_config(config_path))
        logger.debug("Loaded %d settings from %s", len(values), config_path)

    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return DorkscanSettings(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid settings: {exc}") from exc
