# ragdepot/core/records.py
"""
Persisted data models.

On disk a collection file looks like:

    {
      "embeddings": [{"text": ..., "vector": [...], "source": ..., "metadata": {...}}],
      "settings": {"chunkSize": 500, "chunkOverlap": 50, ...}
    }

Settings use camelCase keys on disk; Python code uses snake_case.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Metadata key joining an EmbeddingRecord to the Chunk it came from
CHUNK_ID_KEY = "chunkId"


class EmbeddingRecord(BaseModel):
    """An embedded chunk: text, vector, origin and positional metadata."""

    text: str
    vector: List[float]
    source: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def chunk_id(self) -> Optional[str]:
        value = self.metadata.get(CHUNK_ID_KEY)
        return value if isinstance(value, str) and value else None

    @property
    def dimension(self) -> int:
        return len(self.vector)


class CollectionSettings(BaseModel):
    """
    Settings locked into a collection when it is created.

    Later imports into the collection reuse these instead of the
    current defaults, so every chunk in a collection is comparable.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    chunk_size: int = Field(..., alias="chunkSize", gt=0)
    chunk_overlap: int = Field(..., alias="chunkOverlap", ge=0)
    checkpoint_interval: int = Field(..., alias="checkpointInterval", gt=0)
    embedding_model: str = Field(..., alias="embeddingModel", min_length=1)

    def to_file_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class StoreContents(BaseModel):
    """Result of loading a collection file."""

    records: List[EmbeddingRecord] = Field(default_factory=list)
    settings: Optional[CollectionSettings] = None

    def __len__(self) -> int:
        return len(self.records)

    def chunk_ids(self) -> set[str]:
        return {r.chunk_id for r in self.records if r.chunk_id}


class SearchResult(BaseModel):
    """One ranked hit from similarity search."""

    record: EmbeddingRecord
    score: float
    rank: int = Field(..., ge=1)


__all__ = [
    "CHUNK_ID_KEY",
    "EmbeddingRecord",
    "CollectionSettings",
    "StoreContents",
    "SearchResult",
]
