# ragdepot/cli/commands/collections.py
"""
Collection management commands.

Usage:
    ragdepot collections list
    ragdepot collections info manuals
    ragdepot collections use manuals
    ragdepot collections rename manuals manuals-v1
    ragdepot collections delete manuals --yes
"""

from __future__ import annotations

import typer

from ragdepot.cli.context import CLIContext
from ragdepot.cli.errors import handle_cli_error
from ragdepot.cli.ui import format_bytes, ui
from ragdepot.core.exceptions import RagDepotError
from ragdepot.storage.collections import CollectionInfo

app = typer.Typer(help="Manage collections (list, info, use, rename, delete).", no_args_is_help=True)


def _load_context() -> CLIContext:
    try:
        return CLIContext.load()
    except RagDepotError as e:
        handle_cli_error(e)


def _display_info(info: CollectionInfo, active: bool) -> None:
    rows = [
        ("Name", info.name + (" (active)" if active else "")),
        ("Embeddings", str(info.embedding_count)),
        ("File size", format_bytes(info.file_size_bytes)),
        ("Last modified", info.last_modified.strftime("%Y-%m-%d %H:%M:%S UTC")),
        ("Embeddings file", str(info.embeddings_path)),
        ("Chunks file", str(info.chunks_path) if info.chunks_exists else "(none)"),
    ]
    if info.settings is not None:
        rows += [
            ("Embedding model", info.settings.embedding_model),
            ("Chunk size", str(info.settings.chunk_size)),
            ("Chunk overlap", str(info.settings.chunk_overlap)),
            ("Checkpoint interval", str(info.settings.checkpoint_interval)),
        ]
    ui.key_values(rows, title=info.name)


@app.command("list")
def list_collections() -> None:
    """List all collections."""
    ctx = _load_context()
    infos = ctx.collections.list_collections()
    if not infos:
        ui.info("No collections yet. Run 'ragdepot index' to create one.")
        return

    active = ctx.config.collection
    ui.table(
        ["Collection", "Embeddings", "Size", "Model", "Modified"],
        [
            (
                f"{i.name} *" if i.name == active else i.name,
                str(i.embedding_count),
                format_bytes(i.file_size_bytes),
                i.settings.embedding_model if i.settings else "-",
                i.last_modified.strftime("%Y-%m-%d %H:%M"),
            )
            for i in infos
        ],
    )
    ui.info("* active collection")


@app.command("info")
def info(name: str = typer.Argument(..., help="Collection name.")) -> None:
    """Show details of one collection."""
    ctx = _load_context()
    try:
        details = ctx.collections.get_info(name)
    except RagDepotError as e:
        handle_cli_error(e)
    _display_info(details, active=(name == ctx.config.collection))


@app.command("use")
def use(name: str = typer.Argument(..., help="Collection name.")) -> None:
    """Make a collection the default for index/query/chat."""
    ctx = _load_context()
    try:
        if not ctx.collections.exists(name):
            ui.warning(f"Collection '{name}' does not exist yet", "it will be created on first index")
        path = ctx.set_active_collection(name)
    except RagDepotError as e:
        handle_cli_error(e)
    ui.success(f"Active collection: {name}")
    ui.info(f"Saved to {path}")


@app.command("rename")
def rename(
    old: str = typer.Argument(..., help="Current name."),
    new: str = typer.Argument(..., help="New name."),
) -> None:
    """Rename a collection."""
    ctx = _load_context()
    try:
        ctx.collections.rename(old, new)
        if ctx.config.collection == old:
            ctx.set_active_collection(new)
    except RagDepotError as e:
        handle_cli_error(e)
    ui.success(f"Renamed '{old}' to '{new}'")


@app.command("delete")
def delete(
    name: str = typer.Argument(..., help="Collection name."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Delete a collection and its chunks file."""
    ctx = _load_context()
    if not yes and not ui.prompt_confirm(f"Delete collection '{name}'?", default=False):
        ui.info("Cancelled.")
        raise typer.Exit(0)

    try:
        ctx.collections.delete(name)
    except RagDepotError as e:
        handle_cli_error(e)
    ui.success(f"Deleted collection '{name}'")
