# ragdepot/cli/commands/settings.py
"""
View and change import/query settings.

Usage:
    ragdepot settings show
    ragdepot settings import --chunk-size 800 --chunk-overlap 100
    ragdepot settings query --top-k 5 --template concise
    ragdepot settings reset --yes

Import settings apply to collections created afterwards; an existing
collection keeps the settings it was created with.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import typer
from pydantic import BaseModel, ValidationError

from ragdepot.cli.context import CLIContext
from ragdepot.cli.errors import handle_cli_error
from ragdepot.cli.ui import ui
from ragdepot.config.schema import ImportSettings, QuerySettings
from ragdepot.core.exceptions import ConfigurationError, RagDepotError
from ragdepot.prompts.templates import TemplateLoader

app = typer.Typer(help="View or change import and query settings.", no_args_is_help=True)


def _load_context() -> CLIContext:
    try:
        return CLIContext.load()
    except RagDepotError as e:
        handle_cli_error(e)


def _rows(settings: BaseModel):
    return [(key, str(value)) for key, value in settings.model_dump().items()]


def _apply(current: BaseModel, updates: Dict[str, Any]) -> Any:
    """Validated copy of `current` with updates applied."""
    changes = {k: v for k, v in updates.items() if v is not None}
    try:
        return type(current).model_validate({**current.model_dump(), **changes})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid value: {e.errors()[0]['msg']}") from e


@app.command("show")
def show() -> None:
    """Show current import and query settings."""
    ctx = _load_context()
    try:
        import_settings = ctx.settings.load_import()
    except RagDepotError as e:
        handle_cli_error(e)
    ui.key_values(_rows(import_settings), title="Import settings")
    ui.key_values(_rows(ctx.settings.load_query()), title="Query settings")
    ui.info(f"Templates: {', '.join(TemplateLoader().list_templates())}")


@app.command("import")
def import_settings(
    chunk_size: Optional[int] = typer.Option(None, "--chunk-size", help="Chunk size in characters."),
    chunk_overlap: Optional[int] = typer.Option(None, "--chunk-overlap", help="Overlap in characters."),
    checkpoint_interval: Optional[int] = typer.Option(
        None, "--checkpoint-interval", help="Embeddings per checkpoint."
    ),
    embedding_model: Optional[str] = typer.Option(None, "--embedding-model", help="Embedding model."),
) -> None:
    """Change defaults for new collections."""
    ctx = _load_context()
    try:
        updated: ImportSettings = _apply(
            ctx.settings.load_import(),
            {
                "chunk_size": chunk_size,
                "chunk_overlap": chunk_overlap,
                "checkpoint_interval": checkpoint_interval,
                "embedding_model": embedding_model,
            },
        )
        ctx.settings.save_import(updated)
    except RagDepotError as e:
        handle_cli_error(e)

    ui.key_values(_rows(updated), title="Import settings")
    ui.success("Import settings saved (applies to new collections)")


@app.command("query")
def query_settings(
    top_k: Optional[int] = typer.Option(None, "--top-k", "-k", help="Chunks to retrieve (1-10)."),
    temperature: Optional[float] = typer.Option(None, "--temperature", help="0.0-2.0."),
    max_tokens: Optional[int] = typer.Option(None, "--max-tokens", help="100-8000."),
    template: Optional[str] = typer.Option(None, "--template", help="Prompt template name."),
    show_prompt: Optional[bool] = typer.Option(
        None, "--show-prompt/--hide-prompt", help="Show the full prompt with answers."
    ),
) -> None:
    """Change query settings (applies to the next question)."""
    ctx = _load_context()
    try:
        if template is not None:
            TemplateLoader().load(template)
        updated: QuerySettings = _apply(
            ctx.settings.load_query(),
            {
                "top_k": top_k,
                "temperature": temperature,
                "max_tokens": max_tokens,
                "prompt_template": template,
                "show_prompt": show_prompt,
            },
        )
        ctx.settings.save_query(updated)
    except RagDepotError as e:
        handle_cli_error(e)

    ui.key_values(_rows(updated), title="Query settings")
    ui.success("Query settings saved")


@app.command("reset")
def reset(yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation.")) -> None:
    """Restore default import and query settings."""
    ctx = _load_context()
    if not yes and not ui.prompt_confirm("Reset all settings to defaults?", default=False):
        ui.info("Cancelled.")
        raise typer.Exit(0)
    ctx.settings.reset()
    ui.success("Settings reset to defaults")
