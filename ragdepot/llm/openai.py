# ragdepot/llm/openai.py
"""
OpenAI-compatible embedding and chat-completion clients.

Works against api.openai.com or any gateway exposing the same
/embeddings and /chat/completions endpoints (set base_url).

Retry policy (owned here, not by the pipelines):
    - up to `max_retries` attempts
    - linear backoff: retry_delay * attempt seconds
    - retried: 429, 5xx, timeouts, connection failures
    - not retried: other 4xx (bad key, unknown model, malformed request)
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, List, Optional

import httpx

from ragdepot.core.http import APIError, create_api_client, handle_api_error, raise_for_status
from ragdepot.logging.logger import get_logger
from ragdepot.logging.tags import CHAT, EMBEDDING

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
DEFAULT_CHAT_MODEL = "gpt-4o-mini"


class _OpenAIHTTPClient:
    """Shared request/retry plumbing."""

    provider = "openai"
    timeout_type = "default"
    log_tag = ""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        proxy: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        auth_header: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not model or not model.strip():
            raise ValueError("model is required")
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {max_retries}")

        self._model = model.strip()
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._sleep = sleep

        extra: Dict[str, Any] = {}
        if transport is not None:
            extra["transport"] = transport
        if proxy:
            extra["proxy"] = proxy
        self._client = create_api_client(
            base_url=base_url,
            api_key=api_key,
            timeout=timeout,
            timeout_type=self.timeout_type,
            headers=headers,
            auth_header=auth_header,
            **extra,
        )

    @property
    def model(self) -> str:
        return self._model

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        attempt = 0
        while True:
            attempt += 1
            try:
                response = self._client.post(endpoint, json=payload)
                raise_for_status(response, provider=self.provider, endpoint=endpoint)
                return response.json()
            except APIError as e:
                last_error = e
            except httpx.HTTPError as e:
                last_error = handle_api_error(e, provider=self.provider, endpoint=endpoint)

            if not last_error.retryable or attempt >= self.max_retries:
                raise last_error

            delay = self.retry_delay * attempt
            logger.warning(
                f"{self.log_tag} {endpoint} failed (attempt {attempt}/{self.max_retries}): "
                f"{last_error}. Retrying in {delay:.1f}s"
            )
            self._sleep(delay)


class OpenAIEmbeddingClient(_OpenAIHTTPClient):
    """
    Embedding client for the /embeddings endpoint.

    Usage:
        with OpenAIEmbeddingClient(api_key=key, model="text-embedding-3-small") as client:
            vector = client.embed("hello")
    """

    timeout_type = "embedding"
    log_tag = EMBEDDING

    def __init__(self, *, api_key: str, model: str = DEFAULT_EMBEDDING_MODEL, **kwargs: Any):
        super().__init__(api_key=api_key, model=model, **kwargs)

    def embed(self, text: str) -> List[float]:
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        if any(not t for t in texts):
            raise ValueError("Cannot embed empty text")

        data = self._post("/embeddings", {"model": self._model, "input": list(texts)})

        try:
            items = sorted(data["data"], key=lambda item: item.get("index", 0))
            vectors = [list(map(float, item["embedding"])) for item in items]
        except (KeyError, TypeError, ValueError) as e:
            raise APIError(
                message=f"{self.provider} returned a malformed embedding response",
                provider=self.provider,
                endpoint="/embeddings",
                details=str(e),
            ) from e

        if len(vectors) != len(texts):
            raise APIError(
                message=f"{self.provider} returned {len(vectors)} embeddings for {len(texts)} inputs",
                provider=self.provider,
                endpoint="/embeddings",
            )

        logger.debug(f"{EMBEDDING} Embedded {len(texts)} text(s) with {self._model}")
        return vectors


class OpenAICompletionClient(_OpenAIHTTPClient):
    """Chat-completion client for /chat/completions (single user message)."""

    timeout_type = "chat"
    log_tag = CHAT

    def __init__(self, *, api_key: str, model: str = DEFAULT_CHAT_MODEL, **kwargs: Any):
        super().__init__(api_key=api_key, model=model, **kwargs)

    def complete(self, prompt: str, temperature: float, max_tokens: int) -> str:
        payload = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        data = self._post("/chat/completions", payload)

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise APIError(
                message=f"{self.provider} returned a malformed completion response",
                provider=self.provider,
                endpoint="/chat/completions",
                details=str(e),
            ) from e

        logger.debug(f"{CHAT} Completion received from {self._model}")
        return content or ""


__all__ = [
    "OpenAIEmbeddingClient",
    "OpenAICompletionClient",
    "DEFAULT_BASE_URL",
    "DEFAULT_EMBEDDING_MODEL",
    "DEFAULT_CHAT_MODEL",
]
