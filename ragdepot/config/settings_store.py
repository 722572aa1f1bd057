# ragdepot/config/settings_store.py
"""
Persistence for ImportSettings and QuerySettings.

Both are plain YAML files in {workspace}/settings/. They are loaded
once per command invocation and passed explicitly to the pipelines;
there is no process-wide settings singleton.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ragdepot.config.schema import ImportSettings, QuerySettings
from ragdepot.core.config import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    dump_yaml,
    load_yaml,
)
from ragdepot.core.paths import RagPaths
from ragdepot.logging.logger import get_logger
from ragdepot.logging.tags import CONFIG
from ragdepot.storage.atomic import write_text_atomic

logger = get_logger(__name__)


class SettingsStore:
    """
    Usage:
        store = SettingsStore()
        query = store.load_query()
        query.top_k = 5
        store.save_query(query)
    """

    def __init__(self, import_path: Optional[Path] = None, query_path: Optional[Path] = None):
        self.import_path = Path(import_path) if import_path else RagPaths.import_settings()
        self.query_path = Path(query_path) if query_path else RagPaths.query_settings()

    # =========================================================================
    # Import settings
    # =========================================================================

    def load_import(self) -> ImportSettings:
        """
        Missing file -> defaults.

        Raises:
            ConfigParseError / ConfigValidationError: File exists but is invalid.
        """
        try:
            data = load_yaml(self.import_path)
        except ConfigNotFoundError:
            return ImportSettings()

        try:
            return ImportSettings.model_validate(data)
        except ValidationError as e:
            raise ConfigValidationError(
                f"Invalid import settings: {e}", path=self.import_path
            ) from e

    def save_import(self, settings: ImportSettings) -> None:
        write_text_atomic(self.import_path, dump_yaml(settings.model_dump()))
        logger.debug(f"{CONFIG} Saved import settings to {self.import_path}")

    # =========================================================================
    # Query settings
    # =========================================================================

    def load_query(self) -> QuerySettings:
        """
        Missing file -> defaults.
        Corrupt or out-of-range file -> warning, defaults.
        """
        try:
            data = load_yaml(self.query_path)
        except ConfigNotFoundError:
            return QuerySettings()
        except ConfigParseError as e:
            logger.warning(f"{CONFIG} Corrupted query settings, using defaults: {e}")
            return QuerySettings()

        try:
            return QuerySettings.model_validate(data)
        except ValidationError as e:
            logger.warning(f"{CONFIG} Invalid query settings, using defaults: {e}")
            return QuerySettings()

    def save_query(self, settings: QuerySettings) -> None:
        write_text_atomic(self.query_path, dump_yaml(settings.model_dump()))
        logger.debug(f"{CONFIG} Saved query settings to {self.query_path}")

    def reset(self) -> None:
        """Restore both settings files to defaults."""
        self.save_import(ImportSettings())
        self.save_query(QuerySettings())


__all__ = ["SettingsStore"]
