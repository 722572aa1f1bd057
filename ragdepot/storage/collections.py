# ragdepot/storage/collections.py
"""
Collection lifecycle: list, inspect, rename and delete collection files.

A collection is the pair of files
    collections/<name>.embeddings.json   (source of truth)
    chunks/<name>.chunks.json            (optional inspection artifact)
"""

from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel

from ragdepot.core.exceptions import CollectionNotFoundError, ConfigurationError, StoreError
from ragdepot.core.paths import CHUNKS_SUFFIX, EMBEDDINGS_SUFFIX, validate_collection_name
from ragdepot.core.records import CollectionSettings
from ragdepot.logging.logger import get_logger
from ragdepot.logging.tags import STORAGE
from ragdepot.storage.store import JsonEmbeddingStore

logger = get_logger(__name__)


class CollectionInfo(BaseModel):
    """Summary of one collection on disk."""

    name: str
    embedding_count: int
    file_size_bytes: int
    last_modified: datetime
    embeddings_path: Path
    chunks_path: Path
    chunks_exists: bool
    settings: Optional[CollectionSettings] = None


class CollectionManager:
    """
    Scans the collections directory and manages collection files.

    Usage:
        manager = CollectionManager(RagPaths.collections_dir(), RagPaths.chunks_dir())
        for info in manager.list_collections():
            print(info.name, info.embedding_count)
    """

    def __init__(self, collections_dir: Path, chunks_dir: Path):
        self._collections_dir = Path(collections_dir)
        self._chunks_dir = Path(chunks_dir)

    def embeddings_path(self, name: str) -> Path:
        validate_collection_name(name)
        return self._collections_dir / f"{name}{EMBEDDINGS_SUFFIX}"

    def chunks_path(self, name: str) -> Path:
        validate_collection_name(name)
        return self._chunks_dir / f"{name}{CHUNKS_SUFFIX}"

    def store(self, name: str) -> JsonEmbeddingStore:
        return JsonEmbeddingStore(self.embeddings_path(name))

    def exists(self, name: str) -> bool:
        return self.embeddings_path(name).is_file()

    def list_collections(self) -> List[CollectionInfo]:
        """Every readable collection, sorted by name. Unreadable files are logged and skipped."""
        if not self._collections_dir.is_dir():
            return []

        infos: List[CollectionInfo] = []
        for path in sorted(self._collections_dir.glob(f"*{EMBEDDINGS_SUFFIX}")):
            name = path.name[: -len(EMBEDDINGS_SUFFIX)]
            try:
                infos.append(self.get_info(name))
            except (StoreError, ConfigurationError) as e:
                logger.warning(f"{STORAGE} Skipping collection '{name}': {e}")
        return infos

    def get_info(self, name: str) -> CollectionInfo:
        path = self.embeddings_path(name)
        if not path.is_file():
            raise CollectionNotFoundError(name)

        contents = JsonEmbeddingStore(path).load()
        stat = path.stat()
        chunks_path = self.chunks_path(name)

        return CollectionInfo(
            name=name,
            embedding_count=len(contents.records),
            file_size_bytes=stat.st_size,
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            embeddings_path=path,
            chunks_path=chunks_path,
            chunks_exists=chunks_path.is_file(),
            settings=contents.settings,
        )

    def delete(self, name: str) -> None:
        """Remove a collection and its chunks artifact."""
        path = self.embeddings_path(name)
        if not path.is_file():
            raise CollectionNotFoundError(name)

        path.unlink()
        self.chunks_path(name).unlink(missing_ok=True)
        logger.info(f"{STORAGE} Deleted collection '{name}'")

    def rename(self, old: str, new: str) -> None:
        """Rename a collection (both files). Fails if the target already exists."""
        src = self.embeddings_path(old)
        dst = self.embeddings_path(new)
        if not src.is_file():
            raise CollectionNotFoundError(old)
        if dst.exists():
            raise ConfigurationError(f"Collection '{new}' already exists")

        os.replace(src, dst)
        old_chunks = self.chunks_path(old)
        if old_chunks.is_file():
            new_chunks = self.chunks_path(new)
            new_chunks.parent.mkdir(parents=True, exist_ok=True)
            os.replace(old_chunks, new_chunks)
        logger.info(f"{STORAGE} Renamed collection '{old}' -> '{new}'")


__all__ = ["CollectionInfo", "CollectionManager"]
