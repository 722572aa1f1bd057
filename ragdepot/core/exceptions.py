# ragdepot/core/exceptions.py
"""
All exceptions for ragdepot.

Hierarchy:
    RagDepotError
    ├── ConfigurationError - Invalid settings, raised at construction
    │   └── CredentialError - API key could not be resolved
    ├── RecordValidationError - Malformed record rejected on save
    ├── StoreError - Embedding file could not be read, parsed or written
    ├── CollectionNotFoundError - Named collection does not exist
    ├── DocumentReadError - Source document could not be read
    ├── IndexingError - Indexing run aborted (checkpointed work is kept)
    └── MissingDataError - Expected "no data" outcomes
        ├── NoEmbeddingsError - Collection holds no embeddings
        └── NoRelevantContextError - Search found nothing comparable

API failures live in ragdepot.core.http (APIError and subclasses).
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class RagDepotError(Exception):
    """Base class for ragdepot errors."""

    pass


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationError(RagDepotError):
    """Invalid configuration. Fatal, never retried."""

    pass


class CredentialError(ConfigurationError):
    """Raised when credentials cannot be resolved."""

    pass


# =============================================================================
# Storage
# =============================================================================


class RecordValidationError(RagDepotError):
    """A record failed validation; the whole save was rejected."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        if index is not None:
            message = f"{message} (record {index})"
        super().__init__(message)


class StoreError(RagDepotError):
    """Reading, parsing or writing the embedding file failed."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path:
            message = f"{message} (file: {path})"
        super().__init__(message)


class CollectionNotFoundError(RagDepotError):
    """Raised when a named collection does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Collection '{name}' not found")


# =============================================================================
# Ingestion
# =============================================================================


class DocumentReadError(RagDepotError):
    """A source document could not be read or parsed."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path:
            message = f"{message} (file: {path})"
        super().__init__(message)


class IndexingError(RagDepotError):
    """
    An indexing run aborted.

    Progress already flushed at a checkpoint stays on disk; re-running
    the same indexing resumes after it.
    """

    def __init__(
        self,
        message: str,
        chunk_index: Optional[int] = None,
        source: Optional[str] = None,
    ):
        self.chunk_index = chunk_index
        self.source = source
        parts = [message]
        if chunk_index is not None:
            parts.append(f"chunk {chunk_index}")
        if source:
            parts.append(f"source {source}")
        super().__init__(" | ".join(parts))


# =============================================================================
# Missing data
# =============================================================================


class MissingDataError(RagDepotError):
    """Expected 'nothing to work with' outcome that callers special-case."""

    pass


class NoEmbeddingsError(MissingDataError):
    """The active collection contains no embeddings."""

    def __init__(self, collection: Optional[str] = None):
        self.collection = collection
        target = f"collection '{collection}'" if collection else "storage"
        super().__init__(
            f"No embeddings found in {target}. Run 'ragdepot index' first."
        )


class NoRelevantContextError(MissingDataError):
    """Search returned no comparable records for the query."""

    def __init__(self) -> None:
        super().__init__("No relevant context found for the query")


__all__ = [
    "RagDepotError",
    "ConfigurationError",
    "CredentialError",
    "RecordValidationError",
    "StoreError",
    "CollectionNotFoundError",
    "DocumentReadError",
    "IndexingError",
    "MissingDataError",
    "NoEmbeddingsError",
    "NoRelevantContextError",
]
