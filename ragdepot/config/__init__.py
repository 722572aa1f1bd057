# ragdepot/config/__init__.py
"""
Configuration and settings for ragdepot.
"""

from ragdepot.config.loader import load_rag_config, save_rag_config
from ragdepot.config.schema import ImportSettings, ProviderConfig, QuerySettings, RagConfig
from ragdepot.config.settings_store import SettingsStore

__all__ = [
    "RagConfig",
    "ProviderConfig",
    "ImportSettings",
    "QuerySettings",
    "SettingsStore",
    "load_rag_config",
    "save_rag_config",
]
