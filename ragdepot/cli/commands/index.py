# ragdepot/cli/commands/index.py
"""
Index documents into a collection.

Usage:
    ragdepot index                        # documents_path from config
    ragdepot index ./manuals -c manuals   # explicit path and collection

Re-running the same command resumes: chunks already embedded are
skipped, so an interrupted run only pays for what is missing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ragdepot.cli.context import CLIContext
from ragdepot.cli.errors import handle_cli_error
from ragdepot.cli.ui import ui
from ragdepot.core.exceptions import IndexingError, RagDepotError
from ragdepot.core.http import APIError
from ragdepot.ingestion.pipeline import IndexingPipeline, IndexingResult
from ragdepot.ingestion.reader.engine import FileSystemDocumentReader
from ragdepot.logging.logger import get_logger

logger = get_logger(__name__)


def _display_result(result: IndexingResult) -> None:
    ui.key_values(
        [
            ("Documents", str(result.documents)),
            ("Chunks", str(result.chunks)),
            ("Existing", str(result.existing_count)),
            ("New", str(result.new_count)),
            ("Skipped", str(result.skipped_count)),
            ("Total embeddings", str(result.total)),
        ],
        title=f"Collection '{result.collection}'",
    )


def command(
    path: Optional[Path] = None,
    collection: Optional[str] = None,
    recursive: bool = False,
) -> None:
    """Index documents (file or directory) into a collection."""
    ui.header("ragdepot index", "Chunk, embed and store documents")

    try:
        ctx = CLIContext.load()
        name = ctx.resolve_collection(collection)
        documents_path = path or Path(ctx.config.documents_path)
        defaults = ctx.settings.load_import()
        model = ctx.embedding_model_for(name)
        embedder = ctx.embedding_client(model)
    except RagDepotError as e:
        handle_cli_error(e)

    ui.info(f"Documents: {documents_path}")
    ui.info(f"Collection: {name}  |  Embedding model: {model}")

    with ui.progress() as progress:
        task = progress.add_task("Embedding", total=None)

        def on_progress(current: int, total: int, message: str) -> None:
            progress.update(task, completed=current, total=total, description=message)

        pipeline = IndexingPipeline(
            reader=FileSystemDocumentReader(recursive=recursive),
            embedding_client=embedder,
            store=ctx.store(name),
            collection=name,
            chunks_path=ctx.collections.chunks_path(name),
            progress=on_progress,
        )
        try:
            result = pipeline.run(documents_path, defaults)
        except IndexingError as e:
            progress.stop()
            ui.warning("Progress up to the last checkpoint is saved", "re-run to resume")
            handle_cli_error(e)
        except (RagDepotError, APIError) as e:
            progress.stop()
            handle_cli_error(e)

    if result.documents == 0:
        ui.warning(f"No supported documents found in {documents_path}")
        return

    _display_result(result)
    if result.new_count:
        ui.success(f"Indexed {result.new_count} new chunk(s) into '{name}'")
    else:
        ui.success(f"'{name}' is already up to date")
