# ragdepot/storage/store.py
"""
JSON-file embedding store - one file per collection.

File format:
    {
      "embeddings": [EmbeddingRecord, ...],
      "settings": {"chunkSize": ..., "chunkOverlap": ..., ...}   # optional
    }

Older files that hold a bare JSON array of records (no settings) are
still readable.

Every write goes through write_text_atomic(), so the file on disk is
always either the previous version or a complete new one. This is what
makes save_incremental() usable as a checkpoint: an interrupted indexing
run leaves the last committed checkpoint intact.

Usage:
    store = JsonEmbeddingStore(RagPaths.embeddings("manuals"))
    contents = store.load()
    store.save_incremental(batch, settings=locked_settings)
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from pydantic import ValidationError

from ragdepot.core.chunk import Chunk
from ragdepot.core.exceptions import ConfigurationError, RecordValidationError, StoreError
from ragdepot.core.records import CollectionSettings, EmbeddingRecord, StoreContents
from ragdepot.logging.logger import get_logger
from ragdepot.logging.tags import STORAGE
from ragdepot.storage.atomic import write_text_atomic

logger = get_logger(__name__)

# Number of leading text characters used by the legacy merge key
LEGACY_KEY_PREFIX_CHARS = 50


def record_key(record: EmbeddingRecord) -> str:
    """
    Merge key for a record.

    Records written by the indexing pipeline carry metadata.chunkId and
    are keyed by it.
    """
    chunk_id = record.chunk_id
    if chunk_id:
        return chunk_id

    # Backward compatibility: records written before chunk ids existed.
    # New code paths always set chunkId and never reach this branch.
    first = record.vector[0] if record.vector else ""
    return f"legacy:{record.text[:LEGACY_KEY_PREFIX_CHARS]}:{first}"


def validate_records(records: Sequence[EmbeddingRecord]) -> None:
    """Reject the whole batch if any record lacks text or has an empty or non-finite vector."""
    for i, record in enumerate(records):
        if not isinstance(record.text, str) or not record.text:
            raise RecordValidationError("Each embedding must have a non-empty text field", index=i)
        if not record.vector:
            raise RecordValidationError("Embedding vector cannot be empty", index=i)
        if not all(math.isfinite(x) for x in record.vector):
            raise RecordValidationError("Embedding vector must contain only finite numbers", index=i)


class JsonEmbeddingStore:
    """Durable key-addressed container for one collection's EmbeddingRecords."""

    def __init__(self, path: str | Path):
        if not path or not str(path).strip():
            raise ConfigurationError("Embedding store path cannot be empty")
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    # =========================================================================
    # Read
    # =========================================================================

    def load(self) -> StoreContents:
        """
        Load every record plus the locked settings.

        A missing file yields empty contents. Any other read or parse
        failure raises StoreError.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return StoreContents()
        except OSError as e:
            raise StoreError(f"Failed to read embeddings: {e}", path=self._path) from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreError(f"Embedding file is not valid JSON: {e}", path=self._path) from e

        if isinstance(data, list):
            # Legacy bare-array format
            items, settings_raw = data, None
        elif isinstance(data, dict) and isinstance(data.get("embeddings"), list):
            items, settings_raw = data["embeddings"], data.get("settings")
        else:
            raise StoreError("Stored data is neither an array nor an embeddings object", path=self._path)

        try:
            records = [EmbeddingRecord.model_validate(item) for item in items]
            settings = (
                CollectionSettings.model_validate(settings_raw) if settings_raw else None
            )
        except ValidationError as e:
            raise StoreError(f"Malformed embedding file: {e}", path=self._path) from e

        logger.debug(f"{STORAGE} Loaded {len(records)} records from {self._path}")
        return StoreContents(records=records, settings=settings)

    # =========================================================================
    # Write
    # =========================================================================

    def save(
        self,
        records: Sequence[EmbeddingRecord],
        settings: Optional[CollectionSettings] = None,
    ) -> None:
        """
        Replace the file with exactly `records` (and `settings`).

        Raises:
            RecordValidationError: If any record is malformed; nothing is written.
            StoreError: If the atomic write fails; the previous file is kept.
        """
        validate_records(records)

        payload: Dict[str, Any] = {"embeddings": [r.model_dump(mode="json") for r in records]}
        if settings is not None:
            payload["settings"] = settings.to_file_dict()

        try:
            text = json.dumps(payload, indent=2, ensure_ascii=False, allow_nan=False)
            write_text_atomic(self._path, text)
        except OSError as e:
            raise StoreError(f"Failed to save embeddings: {e}", path=self._path) from e

        logger.debug(f"{STORAGE} Saved {len(records)} records to {self._path}")

    def save_incremental(
        self,
        records: Sequence[EmbeddingRecord],
        settings: Optional[CollectionSettings] = None,
    ) -> int:
        """
        Merge `records` into the stored set and write it back atomically.

        Records are keyed by metadata.chunkId (see record_key); new records
        win on collision, so repeating a batch never duplicates entries.
        Settings already locked in the file are preserved; `settings` is
        only written when the file has none yet.

        Returns:
            Number of records in the merged file.
        """
        validate_records(records)

        existing = self.load()
        merged: Dict[str, EmbeddingRecord] = {record_key(r): r for r in existing.records}
        for record in records:
            merged[record_key(record)] = record

        final = list(merged.values())
        locked = existing.settings or settings
        self._warn_on_mixed_dimensions(final)
        self.save(final, settings=locked)

        logger.info(
            f"{STORAGE} Checkpoint: merged {len(records)} records "
            f"({len(final)} total) into {self._path.name}"
        )
        return len(final)

    def clear(self) -> None:
        """Delete the file. A missing file is not an error."""
        try:
            self._path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise StoreError(f"Failed to clear embeddings: {e}", path=self._path) from e
        logger.info(f"{STORAGE} Cleared {self._path}")

    def _warn_on_mixed_dimensions(self, records: Iterable[EmbeddingRecord]) -> None:
        dims = {r.dimension for r in records}
        if len(dims) > 1:
            logger.warning(
                f"{STORAGE} {self._path.name} mixes vector dimensions {sorted(dims)}; "
                "incomparable records will be skipped during search"
            )


def write_chunks_file(path: str | Path, chunks: List[Chunk]) -> None:
    """
    Write the chunk list of an indexing run for human inspection.

    The pipeline never reads this file back.
    """
    payload = [c.model_dump(mode="json") for c in chunks]
    try:
        text = json.dumps(payload, indent=2, ensure_ascii=False, allow_nan=False)
        write_text_atomic(Path(path), text)
    except OSError as e:
        raise StoreError(f"Failed to write chunks file: {e}", path=Path(path)) from e


__all__ = [
    "JsonEmbeddingStore",
    "record_key",
    "validate_records",
    "write_chunks_file",
    "LEGACY_KEY_PREFIX_CHARS",
]
