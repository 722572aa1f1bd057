# ragdepot/ingestion/chunking/__init__.py
"""
Chunking: raw text -> overlapping, content-addressed Chunks.
"""

from ragdepot.ingestion.chunking.chunker import SlidingWindowChunker

__all__ = ["SlidingWindowChunker"]
