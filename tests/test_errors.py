# tests/test_errors.py
"""
Tests for the exception hierarchy and CLI error guidance.
"""

from __future__ import annotations

import pytest

from ragdepot.cli.errors import guidance_for
from ragdepot.core.exceptions import (
    CollectionNotFoundError,
    ConfigurationError,
    CredentialError,
    IndexingError,
    MissingDataError,
    NoEmbeddingsError,
    NoRelevantContextError,
    RagDepotError,
    RecordValidationError,
    StoreError,
)
from ragdepot.core.http import APIError, RateLimitError

pytestmark = pytest.mark.tier1


class TestExceptionMessages:
    def test_indexing_error_carries_position(self):
        err = IndexingError("Failed to generate embedding", chunk_index=7, source="a.txt")
        assert str(err) == "Failed to generate embedding | chunk 7 | source a.txt"
        assert (err.chunk_index, err.source) == (7, "a.txt")

    def test_record_validation_index(self):
        assert str(RecordValidationError("bad", index=3)) == "bad (record 3)"

    def test_no_embeddings_names_collection(self):
        assert "collection 'docs'" in str(NoEmbeddingsError("docs"))

    def test_missing_data_family(self):
        assert issubclass(NoEmbeddingsError, MissingDataError)
        assert issubclass(NoRelevantContextError, MissingDataError)
        assert issubclass(CredentialError, ConfigurationError)
        assert issubclass(StoreError, RagDepotError)

    def test_api_error_retryable(self):
        assert APIError(message="x").retryable
        assert APIError(message="x", status_code=503).retryable
        assert RateLimitError(message="x", status_code=429).retryable
        assert not APIError(message="x", status_code=400).retryable


class TestGuidance:
    @pytest.mark.parametrize(
        "error,title",
        [
            (CredentialError("no key"), "Missing API Key"),
            (NoEmbeddingsError("docs"), "No Embeddings Available"),
            (NoRelevantContextError(), "No Relevant Context"),
            (CollectionNotFoundError("docs"), "Collection Not Found"),
            (ConfigurationError("Prompt template 'x' not found"), "Prompt Template Error"),
            (ConfigurationError("chunk_overlap too large"), "Invalid Configuration"),
            (APIError(message="openai request timed out"), "API Timeout"),
            (APIError(message="Failed to connect to openai"), "Network Connectivity Issue"),
        ],
    )
    def test_titles(self, error, title):
        assert guidance_for(error).title == title

    def test_innermost_cause_wins(self):
        cause = RateLimitError(message="openai rate limit exceeded", status_code=429)
        try:
            try:
                raise cause
            except RateLimitError as e:
                raise IndexingError("Failed to generate embedding", chunk_index=0) from e
        except IndexingError as err:
            assert guidance_for(err).title == "API Rate Limit Exceeded"

    def test_unknown_error_has_no_guidance(self):
        assert guidance_for(RuntimeError("boom")) is None
