# ragdepot/core/__init__.py
"""
Core models, errors and paths shared by every ragdepot subsystem.
"""

from ragdepot.core.chunk import Chunk, compute_chunk_id
from ragdepot.core.exceptions import (
    CollectionNotFoundError,
    ConfigurationError,
    CredentialError,
    DocumentReadError,
    IndexingError,
    MissingDataError,
    NoEmbeddingsError,
    NoRelevantContextError,
    RagDepotError,
    RecordValidationError,
    StoreError,
)
from ragdepot.core.paths import RagPaths
from ragdepot.core.records import (
    CHUNK_ID_KEY,
    CollectionSettings,
    EmbeddingRecord,
    SearchResult,
    StoreContents,
)

__all__ = [
    "Chunk",
    "compute_chunk_id",
    "CHUNK_ID_KEY",
    "CollectionSettings",
    "EmbeddingRecord",
    "SearchResult",
    "StoreContents",
    "RagPaths",
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
