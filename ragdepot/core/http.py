# ragdepot/core/http.py
"""
HTTP client factory and API error mapping for the LLM clients.

Usage:
    from ragdepot.core.http import create_api_client, raise_for_status

    with create_api_client(base_url, api_key=key, timeout_type="embedding") as client:
        response = client.post("/embeddings", json=payload)
        raise_for_status(response, provider="openai", endpoint="/embeddings")

The core never interprets HTTP status codes itself; it only sees an
APIError (or subclass) that it aborts on (indexing) or surfaces (query).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ragdepot.logging.logger import get_logger

logger = get_logger(__name__)


# =============================================================================
# Errors
# =============================================================================


@dataclass(eq=False)
class APIError(Exception):
    """
    Structured API error.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code (if available)
        provider: API provider name (e.g., "openai")
        endpoint: API endpoint that failed
        details: Error details extracted from the response body
    """

    message: str
    status_code: Optional[int] = None
    provider: Optional[str] = None
    endpoint: Optional[str] = None
    details: Optional[str] = None

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")
        if self.details:
            parts.append(f"- {self.details}")
        return " ".join(parts)

    @property
    def retryable(self) -> bool:
        """Rate limits, server errors and transport failures are worth retrying."""
        if self.status_code is None:
            return True
        return self.status_code == 429 or self.status_code >= 500


class RateLimitError(APIError):
    """Raised when the API rate limit is exceeded."""


class AuthenticationError(APIError):
    """Raised when API authentication fails."""


class ModelNotFoundError(APIError):
    """Raised when the requested model or resource doesn't exist."""


# =============================================================================
# Client Factory
# =============================================================================

DEFAULT_TIMEOUTS: Dict[str, float] = {
    "default": 30.0,
    "chat": 120.0,
    "embedding": 30.0,
}

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def create_api_client(
    base_url: str,
    api_key: Optional[str] = None,
    timeout: Optional[float] = None,
    timeout_type: str = "default",
    headers: Optional[Dict[str, str]] = None,
    auth_header: Optional[str] = None,
    **kwargs: Any,
) -> httpx.Client:
    """
    Create a configured httpx client.

    Args:
        base_url: Base URL for the API (e.g., "https://api.openai.com/v1")
        api_key: API key (optional), sent as a Bearer token by default
        timeout: Request timeout in seconds (overrides timeout_type)
        timeout_type: Preset timeout ("default", "chat", "embedding")
        headers: Additional headers
        auth_header: Send the raw key in this header instead of Authorization
            (e.g. "Ocp-Apim-Subscription-Key" for API gateways)
        **kwargs: Passed through to httpx.Client (e.g. transport, proxy)
    """
    if timeout is None:
        timeout = DEFAULT_TIMEOUTS.get(timeout_type, DEFAULT_TIMEOUTS["default"])

    final_headers = dict(DEFAULT_HEADERS)
    if api_key and auth_header:
        final_headers[auth_header] = api_key
    elif api_key:
        final_headers["Authorization"] = f"Bearer {api_key}"
    if headers:
        final_headers.update(headers)

    client = httpx.Client(base_url=base_url, headers=final_headers, timeout=timeout, **kwargs)
    via = " via proxy" if kwargs.get("proxy") else ""
    logger.debug(f"Created HTTP client for {base_url}{via} (timeout={timeout}s)")
    return client


# =============================================================================
# Error Handling
# =============================================================================


def _extract_details(response: httpx.Response) -> Optional[str]:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200] if response.text else None

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            return error.get("message")
        if isinstance(error, str):
            return error
        return data.get("message")
    return None


def handle_api_error(exc: Exception, provider: str = "unknown", endpoint: str = "") -> APIError:
    """Convert an httpx exception to a structured APIError."""
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        details = _extract_details(exc.response)

        if status_code in (401, 403):
            cls, message = AuthenticationError, f"{provider} authentication failed"
        elif status_code == 429:
            cls, message = RateLimitError, f"{provider} rate limit exceeded"
        elif status_code == 404:
            cls, message = ModelNotFoundError, f"{provider} resource not found"
        else:
            cls, message = APIError, f"{provider} API request failed"

        return cls(
            message=message,
            status_code=status_code,
            provider=provider,
            endpoint=endpoint,
            details=details,
        )

    if isinstance(exc, httpx.TimeoutException):
        return APIError(
            message=f"{provider} request timed out",
            provider=provider,
            endpoint=endpoint,
            details="Consider increasing the timeout for this operation",
        )

    if isinstance(exc, httpx.TransportError):
        return APIError(
            message=f"Failed to connect to {provider}",
            provider=provider,
            endpoint=endpoint,
            details=str(exc),
        )

    return APIError(message=f"{provider} request failed: {exc}", provider=provider, endpoint=endpoint)


def raise_for_status(response: httpx.Response, provider: str = "unknown", endpoint: str = "") -> None:
    """Raise the matching APIError if the response indicates failure."""
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise handle_api_error(exc, provider=provider, endpoint=endpoint) from exc


__all__ = [
    "APIError",
    "RateLimitError",
    "AuthenticationError",
    "ModelNotFoundError",
    "DEFAULT_TIMEOUTS",
    "create_api_client",
    "handle_api_error",
    "raise_for_status",
]
