# ragdepot/config/loader.py
"""
Layered configuration loading.

    1. Package defaults (ragdepot/config/default.yaml) - always loaded
    2. User config ({workspace}/config.yaml) - overrides defaults

The result is a complete, validated RagConfig; callers never need
fallback logic for missing keys.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ragdepot.config.schema import RagConfig
from ragdepot.core.config import (
    ConfigNotFoundError,
    ConfigValidationError,
    deep_merge,
    dump_yaml,
    load_yaml,
)
from ragdepot.core.paths import RagPaths
from ragdepot.logging.logger import get_logger
from ragdepot.logging.tags import CONFIG
from ragdepot.storage.atomic import write_text_atomic

logger = get_logger(__name__)

DEFAULTS_PATH = Path(__file__).parent / "default.yaml"


def load_defaults() -> Dict[str, Any]:
    return load_yaml(DEFAULTS_PATH)


def load_rag_config(path: Optional[Path] = None) -> RagConfig:
    """
    Load config.yaml merged over the package defaults.

    A missing user config is fine: the defaults are used as-is.

    Raises:
        ConfigParseError: User config is not valid YAML.
        ConfigValidationError: Merged config doesn't match RagConfig.
    """
    path = path or RagPaths.config()
    merged = load_defaults()

    try:
        merged = deep_merge(merged, load_yaml(path))
        logger.debug(f"{CONFIG} Merged user config from {path}")
    except ConfigNotFoundError:
        logger.debug(f"{CONFIG} No user config at {path}, using defaults")

    try:
        return RagConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration: {e}", path=path) from e


def save_rag_config(config: RagConfig, path: Optional[Path] = None) -> Path:
    path = path or RagPaths.config()
    write_text_atomic(path, dump_yaml(config.model_dump(exclude_none=True)))
    return path


__all__ = ["load_rag_config", "save_rag_config", "load_defaults", "DEFAULTS_PATH"]
