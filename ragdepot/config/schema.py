# ragdepot/config/schema.py
"""
Typed configuration schemas.

- RagConfig: providers, paths and the active collection (config.yaml)
- ImportSettings: how documents are chunked and embedded (settings/import.yaml)
- QuerySettings: runtime query knobs (settings/query.yaml)

ImportSettings become a collection's locked CollectionSettings the first
time that collection is written. QuerySettings are re-read before every
query, so changes apply to the next question without rebuilding anything.
"""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ragdepot.core.records import CollectionSettings


class ImportSettings(BaseModel):
    """Defaults for new collections."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    chunk_size: int = Field(default=500, gt=0, description="Chunk size in characters")
    chunk_overlap: int = Field(default=50, ge=0, description="Overlap between chunks")
    checkpoint_interval: int = Field(default=50, gt=0, description="Records per checkpoint")
    embedding_model: str = Field(default="text-embedding-3-small", min_length=1)

    @field_validator("embedding_model")
    @classmethod
    def _strip_model(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Embedding model cannot be empty")
        return v

    @model_validator(mode="after")
    def _overlap_below_size(self) -> "ImportSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be less than chunk_size ({self.chunk_size})"
            )
        return self

    def to_collection_settings(self) -> CollectionSettings:
        return CollectionSettings(
            chunk_size=self.chunk_size,
            chunk_overlap=self.chunk_overlap,
            checkpoint_interval=self.checkpoint_interval,
            embedding_model=self.embedding_model,
        )

    @classmethod
    def from_collection_settings(cls, settings: CollectionSettings) -> "ImportSettings":
        return cls(
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap,
            checkpoint_interval=settings.checkpoint_interval,
            embedding_model=settings.embedding_model,
        )


class QuerySettings(BaseModel):
    """Runtime query parameters."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    top_k: int = Field(default=3, ge=1, le=10)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2048, ge=100, le=8000)
    prompt_template: str = Field(default="default", min_length=1)
    show_prompt: bool = False


class ProviderConfig(BaseModel):
    """One LLM provider endpoint."""

    model_config = ConfigDict(extra="forbid")

    provider: str = "openai"
    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    timeout: Optional[float] = Field(default=None, gt=0)
    max_retries: int = Field(default=3, ge=1)
    retry_delay: float = Field(default=1.0, ge=0)
    # Gateway access: outbound proxy URL, extra request headers, and the
    # header that carries the raw key instead of "Authorization: Bearer"
    proxy: Optional[str] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    auth_header: Optional[str] = None

    @field_validator("auth_header")
    @classmethod
    def _auth_header_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("auth_header cannot be blank")
        return v.strip() if v is not None else v

    def client_kwargs(self) -> dict:
        return {
            "base_url": self.base_url,
            "api_key": self.api_key,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
            "retry_delay": self.retry_delay,
            "proxy": self.proxy,
            "headers": dict(self.headers) or None,
            "auth_header": self.auth_header,
        }


class RagConfig(BaseModel):
    """Top-level config.yaml schema."""

    model_config = ConfigDict(extra="forbid")

    collection: str = Field(default="default", min_length=1)
    documents_path: str = "./documents"
    # Embedding model comes from ImportSettings / the collection lock, not from here
    embedding: ProviderConfig = Field(default_factory=ProviderConfig)
    chat: ProviderConfig = Field(default_factory=lambda: ProviderConfig(model="gpt-4o-mini"))


__all__ = ["ImportSettings", "QuerySettings", "ProviderConfig", "RagConfig"]
