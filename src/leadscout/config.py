"""
LeadScout config loading - defaults file + CLI overrides, and pond configs.

Defaults files are YAML (JSON is valid YAML, so .json files load too):

    rate_limit_ms: 800
    max_pages: 50
    tier_filter: AB
    export_to: [json, csv]
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import PondConfig, RunConfig


class ConfigError(Exception):
    """Raised when a config file is missing, unreadable or invalid."""

    pass


def _read_mapping(path: Path) -> dict[str, Any]:
    """Load a YAML/JSON mapping. Empty file -> {}."""
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Path | None = None, overrides: dict[str, Any] | None = None) -> RunConfig:
    """Build a RunConfig from an optional defaults file plus CLI overrides.

    Args:
        path: YAML/JSON defaults file. None means built-in defaults only.
        overrides: Values from the command line. None values are ignored.

    Returns:
        The validated RunConfig.

    Raises:
        ConfigError: If the file cannot be read or the result fails validation.
    """
    data: dict[str, Any] = {}
    if path is not None:
        if not path.exists():
            raise ConfigError(f"Config not found: {path}")
        data = _read_mapping(path)

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    try:
        return RunConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config: {e}") from e


def load_pond_config(path: Path) -> PondConfig | None:
    """Load a PondFinder config. Missing file -> None."""
    if not path.exists():
        return None

    data = _read_mapping(path)
    try:
        return PondConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid pond config {path}: {e}") from e
