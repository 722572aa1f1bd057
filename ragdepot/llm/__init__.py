# ragdepot/llm/__init__.py
"""
Embedding and completion collaborators.
"""

from ragdepot.llm.base import CompletionClient, EmbeddingClient
from ragdepot.llm.registry import available_providers, get_llm_client

__all__ = ["EmbeddingClient", "CompletionClient", "get_llm_client", "available_providers"]
