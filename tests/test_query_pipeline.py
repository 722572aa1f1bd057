# tests/test_query_pipeline.py
"""
Tests for QueryPipeline.

Verifies:
1. Contexts are the top-K hits in rank order
2. Empty collection / nothing comparable raise the two MissingDataErrors
3. Settings are read on every query
4. Custom templates are used, and a broken one falls back to the default
"""

from __future__ import annotations

import logging

import pytest

from ragdepot.config.schema import QuerySettings
from ragdepot.core.exceptions import NoEmbeddingsError, NoRelevantContextError
from ragdepot.core.records import EmbeddingRecord
from ragdepot.engine.pipeline import QueryPipeline
from ragdepot.prompts.builder import DEFAULT_TEMPLATE
from ragdepot.prompts.templates import TemplateLoader
from ragdepot.storage.store import JsonEmbeddingStore
from tests.conftest import FakeCompletionClient, FakeEmbeddingClient

pytestmark = pytest.mark.tier2

QUESTION = "What is alpha?"


@pytest.fixture
def store(tmp_path):
    s = JsonEmbeddingStore(tmp_path / "c.embeddings.json")
    s.save(
        [
            EmbeddingRecord(text="alpha exact", vector=[1.0, 0.0], source="a.txt"),
            EmbeddingRecord(text="beta orthogonal", vector=[0.0, 1.0], source="b.txt"),
            EmbeddingRecord(text="gamma diagonal", vector=[1.0, 1.0], source="c.txt"),
        ]
    )
    return s


@pytest.fixture
def client():
    return FakeEmbeddingClient(vectors={QUESTION: [1.0, 0.0]})


def make_pipeline(store, client, completer, settings=None, templates_dir=None):
    provider = settings if callable(settings) else (lambda: settings or QuerySettings())
    return QueryPipeline(
        embedding_client=client,
        completion_client=completer,
        store=store,
        settings_provider=provider,
        template_loader=TemplateLoader(templates_dir) if templates_dir else None,
        collection="c",
    )


class TestQuery:
    def test_contexts_in_rank_order(self, store, client, completer):
        answer = make_pipeline(store, client, completer, QuerySettings(top_k=2)).query(QUESTION)

        assert [s.record.text for s in answer.sources] == ["alpha exact", "gamma diagonal"]
        assert "[1] alpha exact\n\n[2] gamma diagonal" in answer.prompt
        assert "beta" not in answer.prompt
        assert answer.text == completer.reply

    def test_completion_receives_settings(self, store, client, completer):
        settings = QuerySettings(temperature=0.2, max_tokens=512)
        answer = make_pipeline(store, client, completer, settings).query(QUESTION)

        call = completer.calls[0]
        assert call == {"prompt": answer.prompt, "temperature": 0.2, "max_tokens": 512}

    def test_empty_collection(self, tmp_path, client, completer):
        empty = JsonEmbeddingStore(tmp_path / "none.embeddings.json")
        with pytest.raises(NoEmbeddingsError) as exc_info:
            make_pipeline(empty, client, completer).query(QUESTION)
        assert "'c'" in str(exc_info.value)
        assert completer.calls == []

    def test_nothing_comparable(self, store, completer):
        client = FakeEmbeddingClient(vectors={QUESTION: [1.0, 0.0, 0.0]})
        with pytest.raises(NoRelevantContextError):
            make_pipeline(store, client, completer).query(QUESTION)
        assert completer.calls == []

    @pytest.mark.parametrize("question", ["", "   "])
    def test_empty_question(self, store, client, completer, question):
        with pytest.raises(ValueError):
            make_pipeline(store, client, completer).query(question)

    def test_collaborator_errors_propagate(self, store, completer):
        failing = FakeEmbeddingClient(fail_after=0)
        with pytest.raises(RuntimeError):
            make_pipeline(store, failing, completer).query(QUESTION)


class TestSettingsFreshness:
    def test_settings_read_on_every_query(self, store, client, completer):
        current = {"settings": QuerySettings(top_k=1)}
        pipeline = make_pipeline(store, client, completer, lambda: current["settings"])

        assert len(pipeline.query(QUESTION).sources) == 1
        current["settings"] = QuerySettings(top_k=3, temperature=1.5)
        answer = pipeline.query(QUESTION)

        assert len(answer.sources) == 3
        assert completer.calls[-1]["temperature"] == 1.5


class TestTemplates:
    def test_custom_template_used(self, store, client, completer, tmp_path):
        templates = tmp_path / "templates"
        templates.mkdir()
        (templates / "terse.txt").write_text("Q: {question}\nC: {context}", encoding="utf-8")

        answer = make_pipeline(
            store, client, completer, QuerySettings(top_k=1, prompt_template="terse"), templates
        ).query(QUESTION)

        assert answer.prompt == f"Q: {QUESTION}\nC: [1] alpha exact"

    def test_missing_template_falls_back(self, store, client, completer, tmp_path, caplog):
        caplog.set_level(logging.WARNING)
        answer = make_pipeline(
            store, client, completer, QuerySettings(top_k=1, prompt_template="nope"), tmp_path
        ).query(QUESTION)

        assert answer.prompt.startswith(DEFAULT_TEMPLATE.split("{context}")[0])
        assert "Falling back to default template" in caplog.text

    def test_template_without_placeholders_falls_back(self, store, client, completer, tmp_path):
        (tmp_path / "broken.txt").write_text("no placeholders", encoding="utf-8")
        answer = make_pipeline(
            store, client, completer, QuerySettings(prompt_template="broken"), tmp_path
        ).query(QUESTION)
        assert "Question: What is alpha?" in answer.prompt
