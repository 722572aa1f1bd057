# ragdepot/engine/pipeline.py
"""
Query pipeline: question -> embedding -> search -> prompt -> completion.

Linear, no branching on the happy path. Two outcomes are distinguished
so callers can guide the user instead of reporting a bug:

    NoEmbeddingsError       - the collection is empty (index first)
    NoRelevantContextError  - nothing in the collection is comparable

Query settings (top_k, temperature, max_tokens, prompt_template) are
pulled from `settings_provider` on every call, so a change takes effect
on the very next question without rebuilding the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ragdepot.config.schema import QuerySettings
from ragdepot.core.exceptions import ConfigurationError, NoEmbeddingsError, NoRelevantContextError
from ragdepot.core.records import SearchResult
from ragdepot.llm.base import CompletionClient, EmbeddingClient
from ragdepot.logging.logger import get_logger
from ragdepot.logging.tags import PIPELINE, PROMPT
from ragdepot.prompts.builder import PromptBuilder
from ragdepot.prompts.templates import DEFAULT_TEMPLATE_NAME, TemplateLoader
from ragdepot.retrieval.search import VectorSearch
from ragdepot.storage.store import JsonEmbeddingStore

logger = get_logger(__name__)


@dataclass
class QueryAnswer:
    """Generated answer plus what it was generated from."""

    text: str
    prompt: str
    sources: List[SearchResult] = field(default_factory=list)


class QueryPipeline:
    """
    Usage:
        pipeline = QueryPipeline(
            embedding_client=embedder,
            completion_client=llm,
            store=JsonEmbeddingStore(RagPaths.embeddings("manuals")),
            settings_provider=SettingsStore().load_query,
        )
        answer = pipeline.query("How do I reset the device?")
    """

    def __init__(
        self,
        *,
        embedding_client: EmbeddingClient,
        completion_client: CompletionClient,
        store: JsonEmbeddingStore,
        settings_provider: Callable[[], QuerySettings] = QuerySettings,
        prompt_builder: Optional[PromptBuilder] = None,
        template_loader: Optional[TemplateLoader] = None,
        searcher: Optional[VectorSearch] = None,
        collection: Optional[str] = None,
    ):
        self.embedding_client = embedding_client
        self.completion_client = completion_client
        self.store = store
        self.settings_provider = settings_provider
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.template_loader = template_loader or TemplateLoader()
        self.searcher = searcher or VectorSearch()
        self.collection = collection

    def retrieve(self, question: str, settings: QuerySettings) -> List[SearchResult]:
        """Embed the question and return the ranked hits."""
        logger.debug(f"{PIPELINE} Embedding query")
        query_vector = self.embedding_client.embed(question)

        contents = self.store.load()
        if not contents.records:
            raise NoEmbeddingsError(self.collection)

        results = self.searcher.search(query_vector, contents.records, settings.top_k)
        if not results:
            raise NoRelevantContextError()

        logger.info(f"{PIPELINE} Found {len(results)} relevant chunks (top_k={settings.top_k})")
        return results

    def query(self, question: str) -> QueryAnswer:
        """
        Answer a question from the collection.

        Raises:
            ValueError: Empty question.
            NoEmbeddingsError / NoRelevantContextError: Nothing to answer from.
            APIError: Embedding or completion call failed (propagated untouched).
        """
        if not question or not question.strip():
            raise ValueError("Question cannot be empty")

        settings = self.settings_provider()
        results = self.retrieve(question, settings)

        contexts = [r.record.text for r in results]
        prompt = self._build_prompt(question, contexts, settings.prompt_template)

        logger.debug(
            f"{PIPELINE} Querying LLM (temperature={settings.temperature}, "
            f"max_tokens={settings.max_tokens})"
        )
        text = self.completion_client.complete(prompt, settings.temperature, settings.max_tokens)
        return QueryAnswer(text=text, prompt=prompt, sources=results)

    def _build_prompt(self, question: str, contexts: List[str], template_name: str) -> str:
        if template_name == DEFAULT_TEMPLATE_NAME:
            return self.prompt_builder.build(question, contexts)

        try:
            template = self.template_loader.load(template_name)
        except ConfigurationError as e:
            logger.warning(f"{PROMPT} {e}. Falling back to default template")
            return self.prompt_builder.build(question, contexts)
        return self.prompt_builder.build_with_template(question, contexts, template)


__all__ = ["QueryPipeline", "QueryAnswer"]
