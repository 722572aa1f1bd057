# ragdepot/cli/cli.py
"""
ragdepot CLI - Main application.

Commands:
    ragdepot index         Chunk, embed and store documents (resumable)
    ragdepot query         Answer one question from a collection
    ragdepot chat          Interactive question/answer loop
    ragdepot collections   Manage collections (list, info, use, rename, delete)
    ragdepot settings      View or change import/query settings
    ragdepot status        Configuration, credentials and connectivity

NOTE: index/query/chat/status are lazy - their modules are imported only
when the command is invoked.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from ragdepot.cli.commands import collections as collections_cmd
from ragdepot.cli.commands import settings as settings_cmd
from ragdepot.core.paths import RagPaths
from ragdepot.logging.logger import configure_logging

app = typer.Typer(
    name="ragdepot",
    help="ragdepot - resumable document indexing and question answering.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
    workspace: Optional[Path] = typer.Option(
        None, "--workspace", "-w", help="Workspace directory (default: ./.ragdepot)."
    ),
) -> None:
    configure_logging(logging.DEBUG if verbose else logging.WARNING)
    if workspace is not None:
        RagPaths.set_workspace(workspace)


# =============================================================================
# LAZY COMMANDS
# =============================================================================


@app.command("index")
def index(
    path: Optional[Path] = typer.Argument(None, help="Documents file or directory (default: from config)."),
    collection: Optional[str] = typer.Option(None, "--collection", "-c", help="Collection name."),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Include subdirectories."),
) -> None:
    """Index documents into a collection (re-run to resume)."""
    from ragdepot.cli.commands import index as mod

    mod.command(path=path, collection=collection, recursive=recursive)


@app.command("query")
def query(
    question: str = typer.Argument(..., help="Question to ask."),
    collection: Optional[str] = typer.Option(None, "--collection", "-c", help="Collection name."),
    top_k: Optional[int] = typer.Option(None, "--top-k", "-k", help="Chunks to retrieve (1-10)."),
    show_prompt: Optional[bool] = typer.Option(
        None, "--show-prompt/--hide-prompt", help="Show the full prompt sent to the model."
    ),
) -> None:
    """Query your knowledge base."""
    from ragdepot.cli.commands import query as mod

    mod.command(question=question, collection=collection, top_k=top_k, show_prompt=show_prompt)


@app.command("chat")
def chat(
    collection: Optional[str] = typer.Option(None, "--collection", "-c", help="Collection name."),
) -> None:
    """Interactive chat with your knowledge base."""
    from ragdepot.cli.commands import chat as mod

    mod.command(collection=collection)


@app.command("status")
def status(
    check: bool = typer.Option(False, "--check", help="Call the embedding and chat APIs once."),
) -> None:
    """Show configuration, credentials and collections."""
    from ragdepot.cli.commands import status as mod

    mod.command(check=check)


app.add_typer(collections_cmd.app, name="collections")
app.add_typer(settings_cmd.app, name="settings")


if __name__ == "__main__":
    app()
