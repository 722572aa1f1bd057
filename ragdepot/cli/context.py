# ragdepot/cli/context.py
"""
Central CLI context - single source of truth for all CLI commands.

All configuration reading happens here. Commands build a CLIContext and
ask it for stores, settings and clients instead of reading files
themselves.

Config Loading Strategy:
    1. Package defaults (ragdepot/config/default.yaml) - always loaded
    2. User config (.ragdepot/config.yaml) - overrides defaults

Usage:
    ctx = CLIContext.load()
    name = ctx.resolve_collection(None)     # configured default
    store = ctx.store(name)
    embedder = ctx.embedding_client(ctx.embedding_model_for(name))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ragdepot.config.loader import load_rag_config, save_rag_config
from ragdepot.config.schema import RagConfig
from ragdepot.config.settings_store import SettingsStore
from ragdepot.core.exceptions import StoreError
from ragdepot.core.paths import RagPaths, validate_collection_name
from ragdepot.llm.base import CompletionClient, EmbeddingClient
from ragdepot.llm.openai import DEFAULT_CHAT_MODEL
from ragdepot.llm.registry import get_llm_client
from ragdepot.logging.logger import get_logger
from ragdepot.logging.tags import CLI
from ragdepot.storage.collections import CollectionManager
from ragdepot.storage.store import JsonEmbeddingStore

logger = get_logger(__name__)


@dataclass
class CLIContext:
    """Loaded configuration plus factories for everything a command needs."""

    config: RagConfig
    config_path: Path
    settings: SettingsStore = field(default_factory=SettingsStore)
    collections: CollectionManager = field(
        default_factory=lambda: CollectionManager(RagPaths.collections_dir(), RagPaths.chunks_dir())
    )

    @classmethod
    def load(cls) -> "CLIContext":
        """
        Raises:
            ConfigParseError / ConfigValidationError: config.yaml is invalid.
        """
        path = RagPaths.config()
        return cls(config=load_rag_config(path), config_path=path)

    @property
    def has_user_config(self) -> bool:
        return self.config_path.is_file()

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    def resolve_collection(self, name: Optional[str]) -> str:
        return validate_collection_name(name or self.config.collection)

    def set_active_collection(self, name: str) -> Path:
        self.config.collection = validate_collection_name(name)
        return save_rag_config(self.config, self.config_path)

    def store(self, name: str) -> JsonEmbeddingStore:
        return self.collections.store(name)

    def embedding_model_for(self, name: str) -> str:
        """Model locked into the collection, or the current import default."""
        try:
            locked = self.store(name).load().settings
        except StoreError as e:
            logger.debug(f"{CLI} Could not read settings of '{name}': {e}")
            locked = None
        if locked is not None:
            return locked.embedding_model
        return self.settings.load_import().embedding_model

    # -------------------------------------------------------------------------
    # Clients
    # -------------------------------------------------------------------------

    def embedding_client(self, model: str) -> EmbeddingClient:
        provider = self.config.embedding
        return get_llm_client(
            provider=provider.provider,
            plugin_type="embedding",
            model=model,
            **provider.client_kwargs(),
        )

    def completion_client(self) -> CompletionClient:
        provider = self.config.chat
        return get_llm_client(
            provider=provider.provider,
            plugin_type="chat",
            model=provider.model or DEFAULT_CHAT_MODEL,
            **provider.client_kwargs(),
        )

    @property
    def chat_display(self) -> str:
        return f"{self.config.chat.provider} ({self.config.chat.model})"


__all__ = ["CLIContext"]
