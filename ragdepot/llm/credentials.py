# ragdepot/llm/credentials.py
"""
Credential resolution for LLM providers.

Resolution order:
  1. Explicit config value ("api_key")
  2. Provider-specific env var
  3. Generic fallback env var (RAGDEPOT_API_KEY)

Clients must NOT read environment variables directly.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

from ragdepot.core.exceptions import CredentialError
from ragdepot.logging.logger import get_logger
from ragdepot.logging.tags import CONFIG

logger = get_logger(__name__)

GENERIC_API_KEY_ENV = "RAGDEPOT_API_KEY"

PROVIDER_ENV_MAP: dict[str, list[str]] = {
    "openai": ["OPENAI_API_KEY"],
    # openai-compatible gateways reuse OPENAI semantics
    "openai_compatible": ["OPENAI_COMPATIBLE_API_KEY", "OPENAI_API_KEY"],
}


def resolve_api_key(*, provider: str, config: Optional[Mapping[str, object]] = None) -> str:
    """
    Resolve the API key for `provider`.

    Raises:
        CredentialError: If no key is configured anywhere.
    """
    cfg = config or {}

    api_key = cfg.get("api_key")
    if isinstance(api_key, str) and api_key.strip():
        logger.debug(f"{CONFIG} Using API key from explicit config for provider '{provider}'")
        return api_key.strip()

    env_vars = PROVIDER_ENV_MAP.get(provider, [])
    for env_name in env_vars:
        value = os.getenv(env_name)
        if value:
            logger.debug(f"{CONFIG} Using API key from env '{env_name}' for provider '{provider}'")
            return value

    fallback = os.getenv(GENERIC_API_KEY_ENV)
    if fallback:
        return fallback

    expected = ", ".join(env_vars + [GENERIC_API_KEY_ENV])
    raise CredentialError(
        f"API key for provider '{provider}' not found. "
        f"Set one of: {expected}, or provide 'api_key' in config."
    )


__all__ = ["resolve_api_key", "GENERIC_API_KEY_ENV", "PROVIDER_ENV_MAP"]
