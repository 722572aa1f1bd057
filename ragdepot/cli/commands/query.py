# ragdepot/cli/commands/query.py
"""
Single-question query command.

Usage:
    ragdepot query "How do I reset the device?"
    ragdepot query "question" -c manuals -k 5
    ragdepot query "question" --show-prompt
"""

from __future__ import annotations

from typing import Callable, Optional

from rich.markup import escape

from ragdepot.cli.context import CLIContext
from ragdepot.cli.errors import handle_cli_error
from ragdepot.cli.ui import ui
from ragdepot.config.schema import QuerySettings
from ragdepot.core.exceptions import RagDepotError
from ragdepot.core.http import APIError
from ragdepot.engine.pipeline import QueryAnswer, QueryPipeline
from ragdepot.logging.logger import get_logger

logger = get_logger(__name__)

SNIPPET_CHARS = 80


def build_pipeline(
    ctx: CLIContext,
    collection: str,
    settings_provider: Callable[[], QuerySettings],
) -> QueryPipeline:
    """Wire a QueryPipeline for `collection` from the CLI context."""
    return QueryPipeline(
        embedding_client=ctx.embedding_client(ctx.embedding_model_for(collection)),
        completion_client=ctx.completion_client(),
        store=ctx.store(collection),
        settings_provider=settings_provider,
        collection=collection,
    )


def _snippet(text: str) -> str:
    flat = " ".join(text.split())
    return flat if len(flat) <= SNIPPET_CHARS else flat[: SNIPPET_CHARS - 3] + "..."


def display_answer(answer: QueryAnswer, show_prompt: bool = False) -> None:
    if show_prompt:
        ui.panel(escape(answer.prompt), title="Prompt", style="dim")

    ui.panel(escape(answer.text), title="Answer", style="green")

    if answer.sources:
        ui.table(
            ["#", "Score", "Source", "Text"],
            [
                (
                    str(s.rank),
                    f"{s.score:.3f}",
                    s.record.source or "-",
                    escape(_snippet(s.record.text)),
                )
                for s in answer.sources
            ],
        )


def command(
    question: str,
    collection: Optional[str] = None,
    top_k: Optional[int] = None,
    show_prompt: Optional[bool] = None,
) -> None:
    """Answer one question from a collection."""
    try:
        ctx = CLIContext.load()
        name = ctx.resolve_collection(collection)

        overrides = {}
        if top_k is not None:
            overrides["top_k"] = top_k
        if show_prompt is not None:
            overrides["show_prompt"] = show_prompt

        def settings_provider() -> QuerySettings:
            settings = ctx.settings.load_query()
            if not overrides:
                return settings
            return QuerySettings.model_validate({**settings.model_dump(), **overrides})

        pipeline = build_pipeline(ctx, name, settings_provider)
        settings = settings_provider()

        with ui.progress() as progress:
            progress.add_task(f"Searching '{name}'", total=None)
            answer = pipeline.query(question)
    except (RagDepotError, APIError, ValueError) as e:
        handle_cli_error(e)

    display_answer(answer, show_prompt=settings.show_prompt)
