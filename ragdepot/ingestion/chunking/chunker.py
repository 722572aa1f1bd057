# ragdepot/ingestion/chunking/chunker.py
"""
Fixed-size sliding-window character chunker.

Chunker ID format: "sliding:{chunk_size}:{chunk_overlap}"
Example: "sliding:500:50" for 500-char windows overlapping by 50 chars.

The window advances by chunk_size - chunk_overlap and stops as soon as
a window reaches the end of the text, so the last character is always
covered by the terminal chunk and no window starts past the end.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ragdepot.core.chunk import Chunk, compute_chunk_id
from ragdepot.core.exceptions import ConfigurationError
from ragdepot.logging.logger import get_logger
from ragdepot.logging.tags import CHUNKING

logger = get_logger(__name__)


@dataclass
class SlidingWindowChunker:
    """
    Overlapping fixed-size character chunker.

    Example:
        >>> chunker = SlidingWindowChunker(chunk_size=10, chunk_overlap=2)
        >>> [(c.start_offset, c.end_offset) for c in chunker.chunk("abcdefghijklmno")]
        [(0, 10), (8, 15)]
    """

    plugin_name: str = field(default="sliding", repr=False)
    chunk_size: int = 500
    chunk_overlap: int = 50

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ConfigurationError(f"chunk_size must be > 0, got {self.chunk_size}")
        if self.chunk_overlap < 0:
            raise ConfigurationError(f"chunk_overlap must be >= 0, got {self.chunk_overlap}")
        if self.chunk_overlap >= self.chunk_size:
            raise ConfigurationError(
                f"chunk_overlap ({self.chunk_overlap}) must be < chunk_size ({self.chunk_size})"
            )

    @property
    def chunker_id(self) -> str:
        return f"{self.plugin_name}:{self.chunk_size}:{self.chunk_overlap}"

    @property
    def step(self) -> int:
        return self.chunk_size - self.chunk_overlap

    def chunk(self, text: str, source: Optional[str] = None) -> List[Chunk]:
        """
        Split text into overlapping windows.

        Args:
            text: Full document text.
            source: Optional label (usually the file name) stored on each chunk.

        Returns:
            Chunks in sequence order. Empty list for empty or whitespace-only text.
        """
        if not text or not text.strip():
            return []

        length = len(text)
        chunks: List[Chunk] = []
        start = 0

        while start < length:
            end = min(start + self.chunk_size, length)
            piece = text[start:end]
            chunks.append(
                Chunk(
                    text=piece,
                    start_offset=start,
                    end_offset=end,
                    sequence_index=len(chunks),
                    chunk_id=compute_chunk_id(piece),
                    source_document=source,
                )
            )
            if end == length:
                break
            start += self.step

        total = len(chunks)
        for c in chunks:
            c.total_chunks_in_document = total

        logger.debug(f"{CHUNKING} {self.chunker_id} produced {total} chunks for '{source}'")
        return chunks


__all__ = ["SlidingWindowChunker"]
