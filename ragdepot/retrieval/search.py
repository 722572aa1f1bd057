# ragdepot/retrieval/search.py
"""
Exhaustive cosine-similarity search over stored embedding records.

Every record is scored against the query (O(n*d)); there is no index
structure. Records that cannot be compared with the query (empty
vector, different dimensionality, NaN or infinite score) are skipped
rather than failing the search, which keeps collections that mix
embedding models queryable.

Usage:
    results = VectorSearch().search(query_vector, contents.records, top_k=3)
    for hit in results:
        print(hit.rank, round(hit.score, 3), hit.record.text[:80])
"""

from __future__ import annotations

import math
from typing import List, Sequence, Tuple

import numpy as np

from ragdepot.core.records import EmbeddingRecord, SearchResult
from ragdepot.logging.logger import get_logger
from ragdepot.logging.tags import VECTOR_SEARCH

logger = get_logger(__name__)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    dot(a, b) / (|a| * |b|), or 0.0 when either magnitude is zero.

    Raises:
        ValueError: If either vector is empty or the dimensions differ.
    """
    if len(a) == 0 or len(b) == 0:
        raise ValueError("Vectors cannot be empty")
    if len(a) != len(b):
        raise ValueError(f"Vector dimensions must match. Got {len(a)} and {len(b)}")

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return float(np.dot(va, vb) / (norm_a * norm_b))


class VectorSearch:
    """Exact top-K cosine search."""

    def search(
        self,
        query_vector: Sequence[float],
        records: Sequence[EmbeddingRecord],
        top_k: int,
    ) -> List[SearchResult]:
        """
        Rank `records` by similarity to `query_vector`.

        Args:
            query_vector: Non-empty query embedding.
            records: Candidate records (may be empty).
            top_k: Maximum number of results (> 0).

        Returns:
            Up to top_k results, scores non-increasing, ranks 1-based.
            Ties keep the records' original order.
        """
        if query_vector is None or len(query_vector) == 0:
            raise ValueError("Query vector cannot be empty")
        if top_k <= 0:
            raise ValueError("top_k must be greater than 0")
        if not records:
            return []

        dim = len(query_vector)
        scored: List[Tuple[float, EmbeddingRecord]] = []
        skipped = 0

        for record in records:
            if not record.vector or len(record.vector) != dim:
                skipped += 1
                continue
            score = cosine_similarity(query_vector, record.vector)
            if not math.isfinite(score):
                skipped += 1
                continue
            scored.append((score, record))

        if skipped:
            logger.debug(
                f"{VECTOR_SEARCH} Skipped {skipped} record(s) with empty, "
                f"non-{dim}-dim or non-finite vectors"
            )

        # sorted() is stable: equal scores keep iteration order
        scored = sorted(scored, key=lambda item: item[0], reverse=True)[:top_k]

        results = [
            SearchResult(record=record, score=score, rank=i + 1)
            for i, (score, record) in enumerate(scored)
        ]
        logger.debug(f"{VECTOR_SEARCH} Returning {len(results)} of {len(records)} records")
        return results


def search(
    query_vector: Sequence[float],
    records: Sequence[EmbeddingRecord],
    top_k: int,
) -> List[SearchResult]:
    """Module-level shortcut for VectorSearch().search()."""
    return VectorSearch().search(query_vector, records, top_k)


__all__ = ["VectorSearch", "cosine_similarity", "search"]
