# ragdepot/llm/registry.py
"""
Provider registry for embedding and completion clients.

Design principle: NO SILENT FALLBACK
- If the config names "openai", the caller gets an OpenAI client or an error.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List

from ragdepot.core.exceptions import ConfigurationError
from ragdepot.llm.base import CompletionClient, EmbeddingClient
from ragdepot.llm.credentials import resolve_api_key
from ragdepot.llm.openai import DEFAULT_BASE_URL, OpenAICompletionClient, OpenAIEmbeddingClient

VALID_LLM_TYPES = frozenset({"chat", "embedding"})

_EMBEDDING_PROVIDERS: Dict[str, Callable[..., EmbeddingClient]] = {
    "openai": OpenAIEmbeddingClient,
    "openai_compatible": OpenAIEmbeddingClient,
}

_CHAT_PROVIDERS: Dict[str, Callable[..., CompletionClient]] = {
    "openai": OpenAICompletionClient,
    "openai_compatible": OpenAICompletionClient,
}


def _providers(plugin_type: str) -> Dict[str, Callable[..., Any]]:
    if plugin_type not in VALID_LLM_TYPES:
        raise ValueError(
            f"Invalid LLM plugin type: {plugin_type!r}. Must be one of: {sorted(VALID_LLM_TYPES)}"
        )
    return _EMBEDDING_PROVIDERS if plugin_type == "embedding" else _CHAT_PROVIDERS


def available_providers(plugin_type: str) -> List[str]:
    return sorted(_providers(plugin_type))


def get_llm_client(*, provider: str, plugin_type: str, model: str, **kwargs: Any) -> Any:
    """
    Build a client for `provider`.

    kwargs may carry "api_key", "base_url", "timeout", "max_retries",
    "retry_delay", "proxy", "headers" and "auth_header"; the API key is
    resolved via resolve_api_key().

    Raises:
        ConfigurationError: Unknown provider or missing credentials.
    """
    providers = _providers(plugin_type)
    factory = providers.get(provider)
    if factory is None:
        raise ConfigurationError(
            f"Unknown {plugin_type} provider: {provider!r}. Available: {sorted(providers)}"
        )

    api_key = resolve_api_key(provider=provider, config=kwargs)
    options = {k: v for k, v in kwargs.items() if k != "api_key" and v is not None}
    options.setdefault("base_url", DEFAULT_BASE_URL)
    return factory(api_key=api_key, model=model, **options)


__all__ = ["get_llm_client", "available_providers", "VALID_LLM_TYPES"]
