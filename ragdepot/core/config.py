# ragdepot/core/config.py
"""
YAML loading primitives shared by every config file ragdepot reads.

Usage:
    from ragdepot.core.config import load_yaml, deep_merge, ConfigNotFoundError

Schemas live in ragdepot.config.schema; this module only reads, merges
and reports errors with file paths.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ragdepot.core.exceptions import ConfigurationError
from ragdepot.logging.logger import get_logger

logger = get_logger(__name__)


class ConfigError(ConfigurationError):
    """Base error for configuration files."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path:
            message = f"{message} (file: {path})"
        super().__init__(message)


class ConfigNotFoundError(ConfigError):
    """Raised when a config file doesn't exist."""


class ConfigParseError(ConfigError):
    """Raised when YAML parsing fails."""


class ConfigValidationError(ConfigError):
    """Raised when config doesn't match its schema."""


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a YAML mapping from disk.

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigParseError: If the YAML is invalid or not a mapping
    """
    p = Path(path)

    if not p.exists():
        raise ConfigNotFoundError("Config file not found", path=p)
    if p.is_dir():
        raise ConfigError("Config path is a directory, not a file", path=p)

    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Invalid YAML syntax: {e}", path=p) from e
    except OSError as e:
        raise ConfigParseError(f"Failed to read config: {e}", path=p) from e

    if not isinstance(data, dict):
        raise ConfigParseError("Config root must be a mapping (dict)", path=p)

    logger.debug(f"Loaded config from {p}")
    return data


def deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries; `override` wins.

    Nested dicts merge recursively, lists are replaced entirely.

    >>> deep_merge({"a": 1, "b": {"c": 2, "d": 3}}, {"b": {"c": 10}})
    {'a': 1, 'b': {'c': 10, 'd': 3}}
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def dump_yaml(data: Dict[str, Any]) -> str:
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


__all__ = [
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    "load_yaml",
    "deep_merge",
    "dump_yaml",
]
