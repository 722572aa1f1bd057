# tests/test_chunker.py
"""
Tests for SlidingWindowChunker.

Verifies:
1. Window boundaries (step = size - overlap, terminal window ends at len)
2. Every character is covered, in order, with the configured overlap
3. chunk_id is the SHA-256 of the chunk text
4. Invalid parameters are rejected at construction
"""

from __future__ import annotations

import hashlib

import pytest

from ragdepot.core.chunk import compute_chunk_id
from ragdepot.core.exceptions import ConfigurationError
from ragdepot.ingestion.chunking.chunker import SlidingWindowChunker

pytestmark = pytest.mark.tier1


class TestWindowBoundaries:
    def test_worked_example(self):
        """15 chars, size 10, overlap 2 -> [0,10) and [8,15)."""
        text = "abcdefghijklmno"
        chunks = SlidingWindowChunker(chunk_size=10, chunk_overlap=2).chunk(text)

        assert [(c.start_offset, c.end_offset) for c in chunks] == [(0, 10), (8, 15)]
        assert chunks[0].text == "abcdefghij"
        assert chunks[1].text == "ijklmno"

    def test_text_shorter_than_window(self):
        chunks = SlidingWindowChunker(chunk_size=100, chunk_overlap=10).chunk("short text")
        assert len(chunks) == 1
        assert (chunks[0].start_offset, chunks[0].end_offset) == (0, 10)

    def test_exact_multiple_has_no_trailing_sliver(self):
        """A window that reaches the end stops the loop."""
        text = "x" * 18
        chunks = SlidingWindowChunker(chunk_size=10, chunk_overlap=2).chunk(text)
        assert [(c.start_offset, c.end_offset) for c in chunks] == [(0, 10), (8, 18)]

    def test_zero_overlap_partitions_text(self):
        text = "0123456789" * 3
        chunks = SlidingWindowChunker(chunk_size=10, chunk_overlap=0).chunk(text)
        assert "".join(c.text for c in chunks) == text

    @pytest.mark.parametrize("text", ["", "   ", "\n\t\n"])
    def test_empty_or_whitespace_yields_nothing(self, text):
        assert SlidingWindowChunker(chunk_size=10, chunk_overlap=2).chunk(text) == []


class TestCoverage:
    @pytest.mark.parametrize("size,overlap,length", [(10, 2, 97), (7, 3, 50), (500, 50, 1234)])
    def test_chunks_cover_document_contiguously(self, size, overlap, length):
        text = "".join(chr(ord("a") + i % 26) for i in range(length))
        chunks = SlidingWindowChunker(chunk_size=size, chunk_overlap=overlap).chunk(text)

        assert chunks[0].start_offset == 0
        assert chunks[-1].end_offset == length
        for prev, nxt in zip(chunks, chunks[1:]):
            assert nxt.start_offset == prev.start_offset + (size - overlap)
            assert nxt.start_offset < prev.end_offset
        for c in chunks:
            assert c.start_offset < c.end_offset
            assert c.text == text[c.start_offset : c.end_offset]

    def test_sequence_and_totals(self):
        chunks = SlidingWindowChunker(chunk_size=10, chunk_overlap=2).chunk("a" * 40, source="a.txt")
        assert [c.sequence_index for c in chunks] == list(range(len(chunks)))
        assert all(c.total_chunks_in_document == len(chunks) for c in chunks)
        assert all(c.source_document == "a.txt" for c in chunks)


class TestChunkIds:
    def test_id_is_sha256_of_text(self):
        chunk = SlidingWindowChunker(chunk_size=10, chunk_overlap=2).chunk("hello world!")[0]
        assert chunk.chunk_id == hashlib.sha256(chunk.text.encode("utf-8")).hexdigest()

    def test_id_is_deterministic_across_sources(self):
        """Same content, different document -> same id."""
        chunker = SlidingWindowChunker(chunk_size=10, chunk_overlap=2)
        a = chunker.chunk("identical text here", source="a.txt")
        b = chunker.chunk("identical text here", source="b.txt")
        assert [c.chunk_id for c in a] == [c.chunk_id for c in b]

    def test_unicode_text_hashes_utf8(self):
        assert compute_chunk_id("café") == hashlib.sha256("café".encode("utf-8")).hexdigest()


class TestChunkerConfig:
    def test_default_chunker_id(self):
        assert SlidingWindowChunker().chunker_id == "sliding:500:50"

    def test_step(self):
        assert SlidingWindowChunker(chunk_size=10, chunk_overlap=2).step == 8

    @pytest.mark.parametrize(
        "size,overlap",
        [(0, 0), (-5, 0), (10, -1), (10, 10), (10, 15)],
    )
    def test_invalid_parameters_rejected(self, size, overlap):
        with pytest.raises(ConfigurationError):
            SlidingWindowChunker(chunk_size=size, chunk_overlap=overlap)
