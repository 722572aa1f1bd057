# tests/conftest.py
"""
Shared fixtures.

Test Tiers:
- tier1: Pure logic, no I/O         Run: pytest -m tier1
- tier2: Filesystem and mocks       Run: pytest -m "tier1 or tier2"

No test talks to a real provider: embedding and completion clients are
the in-memory fakes below, HTTP clients run on httpx.MockTransport.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import List, Optional

import pytest

from ragdepot.core.paths import RagPaths

# =============================================================================
# Fake clients
# =============================================================================


def fake_vector(text: str, dim: int = 8) -> List[float]:
    """Deterministic non-zero vector derived from the text."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    return [float(b % 17) + 1.0 for b in digest[:dim]]


class FakeEmbeddingClient:
    """
    Deterministic embedder.

    fail_after: raise on the (fail_after + 1)-th call.
    vectors: fixed text -> vector overrides.
    """

    def __init__(
        self,
        model: str = "text-embedding-3-small",
        dim: int = 8,
        fail_after: Optional[int] = None,
        vectors: Optional[dict] = None,
    ):
        self._model = model
        self.dim = dim
        self.fail_after = fail_after
        self.vectors = vectors or {}
        self.calls: List[str] = []

    @property
    def model(self) -> str:
        return self._model

    def embed(self, text: str) -> List[float]:
        if self.fail_after is not None and len(self.calls) >= self.fail_after:
            raise RuntimeError("embedding service unavailable")
        self.calls.append(text)
        return list(self.vectors.get(text, fake_vector(text, self.dim)))

    def embed_batch(self, texts: List[str]) -> List[List[float]]:
        return [self.embed(t) for t in texts]


class FakeCompletionClient:
    def __init__(self, reply: str = "The answer [1]."):
        self.reply = reply
        self.calls: List[dict] = []

    def complete(self, prompt: str, temperature: float, max_tokens: int) -> str:
        self.calls.append({"prompt": prompt, "temperature": temperature, "max_tokens": max_tokens})
        return self.reply


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def embedder() -> FakeEmbeddingClient:
    return FakeEmbeddingClient()


@pytest.fixture
def completer() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def workspace(tmp_path: Path):
    """Isolated .ragdepot workspace; RagPaths points at it for the test."""
    root = tmp_path / ".ragdepot"
    RagPaths.set_workspace(root)
    yield root
    RagPaths.reset()


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Two small text documents."""
    d = tmp_path / "documents"
    d.mkdir()
    (d / "alpha.txt").write_text("Alpha document. " * 10, encoding="utf-8")
    (d / "beta.md").write_text("# Beta\n\nBeta document with **bold** text. " * 5, encoding="utf-8")
    return d
