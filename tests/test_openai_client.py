# tests/test_openai_client.py
"""
Tests for the OpenAI-compatible HTTP clients, registry and credentials.

All HTTP runs on httpx.MockTransport; sleeps are recorded, not taken.
"""

from __future__ import annotations

import json

import httpx
import pytest

from ragdepot.core.exceptions import ConfigurationError, CredentialError
from ragdepot.core.http import APIError, AuthenticationError, RateLimitError
from ragdepot.llm.credentials import resolve_api_key
from ragdepot.llm.openai import OpenAICompletionClient, OpenAIEmbeddingClient
from ragdepot.llm.registry import available_providers, get_llm_client

pytestmark = pytest.mark.tier2


def embedding_response(vectors):
    return {
        "object": "list",
        "data": [{"object": "embedding", "index": i, "embedding": v} for i, v in enumerate(vectors)],
    }


class Recorder:
    """MockTransport handler returning queued responses in order."""

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)


def make_embedder(handler, **kwargs):
    sleeps = []
    client = OpenAIEmbeddingClient(
        api_key="sk-test",
        transport=httpx.MockTransport(handler),
        sleep=sleeps.append,
        **kwargs,
    )
    return client, sleeps


class TestEmbeddingClient:
    def test_embed_posts_model_and_input(self):
        handler = Recorder(httpx.Response(200, json=embedding_response([[0.1, 0.2]])))
        client, _ = make_embedder(handler, model="text-embedding-3-large")

        assert client.embed("hello") == [0.1, 0.2]

        request = handler.requests[0]
        assert request.url.path == "/v1/embeddings"
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert json.loads(request.content) == {"model": "text-embedding-3-large", "input": ["hello"]}

    def test_batch_results_sorted_by_index(self):
        payload = {"data": [{"index": 1, "embedding": [2.0]}, {"index": 0, "embedding": [1.0]}]}
        client, _ = make_embedder(Recorder(httpx.Response(200, json=payload)))
        assert client.embed_batch(["a", "b"]) == [[1.0], [2.0]]

    def test_count_mismatch(self):
        client, _ = make_embedder(Recorder(httpx.Response(200, json=embedding_response([[1.0]]))))
        with pytest.raises(APIError, match="1 embeddings for 2 inputs"):
            client.embed_batch(["a", "b"])

    def test_malformed_response(self):
        client, _ = make_embedder(Recorder(httpx.Response(200, json={"unexpected": True})))
        with pytest.raises(APIError, match="malformed"):
            client.embed("a")

    def test_empty_text_rejected_without_request(self):
        handler = Recorder()
        client, _ = make_embedder(handler)
        with pytest.raises(ValueError):
            client.embed("")
        assert handler.requests == []

    def test_model_property(self):
        client, _ = make_embedder(Recorder())
        assert client.model == "text-embedding-3-small"


class TestRetryPolicy:
    def test_retries_rate_limit_with_linear_backoff(self):
        handler = Recorder(
            httpx.Response(429, json={"error": {"message": "slow down"}}),
            httpx.Response(503),
            httpx.Response(200, json=embedding_response([[1.0]])),
        )
        client, sleeps = make_embedder(handler, retry_delay=0.5)

        assert client.embed("a") == [1.0]
        assert len(handler.requests) == 3
        assert sleeps == [0.5, 1.0]

    def test_gives_up_after_max_retries(self):
        handler = Recorder(*[httpx.Response(500) for _ in range(3)])
        client, sleeps = make_embedder(handler, max_retries=3)

        with pytest.raises(APIError) as exc_info:
            client.embed("a")
        assert exc_info.value.status_code == 500
        assert len(handler.requests) == 3
        assert len(sleeps) == 2

    def test_single_attempt_raises_transport_error_without_sleep(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client, sleeps = make_embedder(handler, max_retries=1)

        with pytest.raises(APIError) as exc_info:
            client.embed("a")
        assert exc_info.value.status_code is None
        assert sleeps == []

    def test_rate_limit_error_type_after_exhaustion(self):
        handler = Recorder(*[httpx.Response(429) for _ in range(2)])
        client, _ = make_embedder(handler, max_retries=2)
        with pytest.raises(RateLimitError):
            client.embed("a")

    def test_auth_error_not_retried(self):
        handler = Recorder(httpx.Response(401, json={"error": {"message": "bad key"}}))
        client, sleeps = make_embedder(handler)

        with pytest.raises(AuthenticationError) as exc_info:
            client.embed("a")
        assert "bad key" in str(exc_info.value)
        assert len(handler.requests) == 1
        assert sleeps == []

    def test_connection_error_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json=embedding_response([[3.0]]))

        client, sleeps = make_embedder(handler)
        assert client.embed("a") == [3.0]
        assert sleeps == [1.0]


class TestCompletionClient:
    def test_complete(self):
        handler = Recorder(
            httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": "Hi!"}}]})
        )
        client = OpenAICompletionClient(
            api_key="sk-test", transport=httpx.MockTransport(handler), sleep=lambda s: None
        )

        assert client.complete("Say hi", 0.3, 256) == "Hi!"
        body = json.loads(handler.requests[0].content)
        assert handler.requests[0].url.path == "/v1/chat/completions"
        assert body == {
            "model": "gpt-4o-mini",
            "messages": [{"role": "user", "content": "Say hi"}],
            "temperature": 0.3,
            "max_tokens": 256,
        }

    def test_malformed_completion(self):
        handler = Recorder(httpx.Response(200, json={"choices": []}))
        client = OpenAICompletionClient(api_key="k", transport=httpx.MockTransport(handler))
        with pytest.raises(APIError):
            client.complete("x", 0.0, 100)


class TestGatewayAccess:
    def test_custom_auth_header_replaces_bearer(self):
        handler = Recorder(httpx.Response(200, json=embedding_response([[1.0]])))
        client, _ = make_embedder(handler, auth_header="Ocp-Apim-Subscription-Key")

        client.embed("hello")

        request = handler.requests[0]
        assert request.headers["Ocp-Apim-Subscription-Key"] == "sk-test"
        assert "Authorization" not in request.headers

    def test_extra_headers_sent(self):
        handler = Recorder(httpx.Response(200, json=embedding_response([[1.0]])))
        client, _ = make_embedder(handler, headers={"X-Team": "docs"})

        client.embed("hello")

        request = handler.requests[0]
        assert request.headers["X-Team"] == "docs"
        assert request.headers["Authorization"] == "Bearer sk-test"

    def test_proxy_forwarded_to_httpx(self, monkeypatch):
        captured = {}
        real_client = httpx.Client

        def capture(**kwargs):
            captured.update(kwargs)
            return real_client(**{k: v for k, v in kwargs.items() if k != "proxy"})

        monkeypatch.setattr(httpx, "Client", capture)
        OpenAICompletionClient(api_key="k", proxy="http://proxy.local:8080")

        assert captured["proxy"] == "http://proxy.local:8080"

    def test_no_proxy_by_default(self, monkeypatch):
        captured = {}
        real_client = httpx.Client

        def capture(**kwargs):
            captured.update(kwargs)
            return real_client(**kwargs)

        monkeypatch.setattr(httpx, "Client", capture)
        OpenAICompletionClient(api_key="k")

        assert "proxy" not in captured


class TestCredentials:
    def test_explicit_key_wins(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "from-env")
        assert resolve_api_key(provider="openai", config={"api_key": "explicit"}) == "explicit"

    def test_provider_env(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "from-env")
        assert resolve_api_key(provider="openai") == "from-env"

    def test_generic_fallback(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.setenv("RAGDEPOT_API_KEY", "generic")
        assert resolve_api_key(provider="openai") == "generic"

    def test_missing(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.delenv("RAGDEPOT_API_KEY", raising=False)
        with pytest.raises(CredentialError, match="OPENAI_API_KEY"):
            resolve_api_key(provider="openai")


class TestRegistry:
    def test_builds_embedding_client(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        client = get_llm_client(
            provider="openai", plugin_type="embedding", model="m", base_url=None, max_retries=2
        )
        assert isinstance(client, OpenAIEmbeddingClient)
        assert client.model == "m"
        assert client.max_retries == 2

    def test_passes_gateway_options(self, monkeypatch):
        monkeypatch.delenv("OPENAI_COMPATIBLE_API_KEY", raising=False)
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        handler = Recorder(httpx.Response(200, json=embedding_response([[1.0]])))
        client = get_llm_client(
            provider="openai_compatible",
            plugin_type="embedding",
            model="m",
            base_url="https://gateway.example.com/v1",
            auth_header="Ocp-Apim-Subscription-Key",
            headers={"X-Team": "docs"},
            proxy=None,
            transport=httpx.MockTransport(handler),
        )

        client.embed("hello")

        request = handler.requests[0]
        assert str(request.url) == "https://gateway.example.com/v1/embeddings"
        assert request.headers["Ocp-Apim-Subscription-Key"] == "sk-env"
        assert request.headers["X-Team"] == "docs"

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match="Unknown chat provider"):
            get_llm_client(provider="nope", plugin_type="chat", model="m", api_key="k")

    def test_invalid_plugin_type(self):
        with pytest.raises(ValueError):
            available_providers("rerank")

    def test_available(self):
        assert available_providers("chat") == ["openai", "openai_compatible"]
