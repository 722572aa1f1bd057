# ragdepot/core/paths.py
"""
Central path management for ragdepot.

All components that need file paths use this module.

Layout (workspace defaults to {CWD}/.ragdepot/):
    config.yaml
    collections/<name>.embeddings.json
    chunks/<name>.chunks.json
    settings/import.yaml
    settings/query.yaml
    templates/<name>.txt
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from ragdepot.core.exceptions import ConfigurationError

EMBEDDINGS_SUFFIX = ".embeddings.json"
CHUNKS_SUFFIX = ".chunks.json"

_COLLECTION_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


def validate_collection_name(name: str) -> str:
    """Reject names that would escape the collections directory."""
    if not name or not _COLLECTION_NAME.match(name) or ".." in name:
        raise ConfigurationError(
            f"Invalid collection name '{name}'. "
            "Use letters, digits, '_', '-' or '.', starting with a letter or digit."
        )
    return name


class RagPaths:
    """
    Workspace-relative path resolution.

    Usage:
        from ragdepot.core.paths import RagPaths

        path = RagPaths.embeddings("manuals")

        # Override workspace for testing
        RagPaths.set_workspace("/tmp/test_ragdepot")
    """

    _workspace_override: Optional[Path] = None

    @classmethod
    def set_workspace(cls, path: Optional[str | Path]) -> None:
        """Override the workspace root. Pass None to reset to default (CWD)."""
        cls._workspace_override = Path(path) if path is not None else None

    @classmethod
    def reset(cls) -> None:
        """Reset to default workspace (CWD). Useful in tests."""
        cls._workspace_override = None

    @classmethod
    def workspace(cls) -> Path:
        if cls._workspace_override is not None:
            return cls._workspace_override
        return Path.cwd() / ".ragdepot"

    @classmethod
    def ensure_workspace(cls) -> Path:
        path = cls.workspace()
        path.mkdir(parents=True, exist_ok=True)
        return path

    # =========================================================================
    # Configuration
    # =========================================================================

    @classmethod
    def config(cls) -> Path:
        return cls.workspace() / "config.yaml"

    @classmethod
    def settings_dir(cls) -> Path:
        return cls.workspace() / "settings"

    @classmethod
    def import_settings(cls) -> Path:
        return cls.settings_dir() / "import.yaml"

    @classmethod
    def query_settings(cls) -> Path:
        return cls.settings_dir() / "query.yaml"

    @classmethod
    def templates_dir(cls) -> Path:
        return cls.workspace() / "templates"

    # =========================================================================
    # Collections
    # =========================================================================

    @classmethod
    def collections_dir(cls) -> Path:
        return cls.workspace() / "collections"

    @classmethod
    def chunks_dir(cls) -> Path:
        return cls.workspace() / "chunks"

    @classmethod
    def embeddings(cls, collection: str) -> Path:
        """Location: {workspace}/collections/{collection}.embeddings.json"""
        validate_collection_name(collection)
        return cls.collections_dir() / f"{collection}{EMBEDDINGS_SUFFIX}"

    @classmethod
    def chunks(cls, collection: str) -> Path:
        """Location: {workspace}/chunks/{collection}.chunks.json"""
        validate_collection_name(collection)
        return cls.chunks_dir() / f"{collection}{CHUNKS_SUFFIX}"


__all__ = ["RagPaths", "validate_collection_name", "EMBEDDINGS_SUFFIX", "CHUNKS_SUFFIX"]
