# ragdepot/llm/base.py
"""
Collaborator contracts for embedding and completion providers.

Each provider implements these protocols; the pipelines only depend on
the protocols, never on a concrete provider. Failures surface as
ragdepot.core.http.APIError (or a subclass) after the provider's own
retry policy has been exhausted.
"""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable


@runtime_checkable
class EmbeddingClient(Protocol):
    """Turns text into vectors."""

    @property
    def model(self) -> str: ...

    def embed(self, text: str) -> List[float]: ...

    def embed_batch(self, texts: List[str]) -> List[List[float]]: ...


@runtime_checkable
class CompletionClient(Protocol):
    """Generates text from a prompt."""

    def complete(self, prompt: str, temperature: float, max_tokens: int) -> str: ...


__all__ = ["EmbeddingClient", "CompletionClient"]
