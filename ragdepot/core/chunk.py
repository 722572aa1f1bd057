# ragdepot/core/chunk.py
"""
Chunk - a bounded substring of a source document plus positional metadata.

Chunks are rebuilt on every indexing run and discarded after embedding.
The chunk_id is a SHA-256 digest of the exact chunk text, so identical
content always maps to the same id regardless of which document it came
from. Resume and cross-document dedup are built on that property.
"""

from __future__ import annotations

import hashlib
from typing import Optional

from pydantic import BaseModel, Field


def compute_chunk_id(text: str) -> str:
    """Stable 64-char hex id derived from the chunk text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class Chunk(BaseModel):
    """One window of a document produced by the chunker."""

    text: str = Field(..., description="Chunk text content")
    start_offset: int = Field(..., ge=0, description="Start character offset (inclusive)")
    end_offset: int = Field(..., gt=0, description="End character offset (exclusive)")
    sequence_index: int = Field(..., ge=0, description="Position of this chunk in its document")
    chunk_id: str = Field(..., description="SHA-256 hex digest of text")
    source_document: Optional[str] = Field(default=None, description="Source label")
    total_chunks_in_document: int = Field(default=0, ge=0)


__all__ = ["Chunk", "compute_chunk_id"]
