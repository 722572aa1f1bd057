# ragdepot/cli/commands/chat.py
"""
Interactive chat against one collection.

Usage:
    ragdepot chat
    ragdepot chat -c manuals

In-chat commands:
    /help                list commands
    /prompt              toggle showing the full prompt (saved to query settings)
    /settings            show current query settings
    /import-settings     show import defaults for new collections
    /collections         list collections
    /collection <name>   switch collection for the rest of the session
    /status              show the current collection and models
    /exit, /quit         leave the chat

Query settings are re-read before every question, so running
`ragdepot settings query ...` in another terminal takes effect on the
next question. Switching collections with /collection does not change
the active collection stored in config.yaml.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ragdepot.cli.commands.query import build_pipeline, display_answer
from ragdepot.cli.context import CLIContext
from ragdepot.cli.errors import handle_cli_error, show_error
from ragdepot.cli.ui import format_bytes, ui
from ragdepot.core.exceptions import CollectionNotFoundError, MissingDataError, RagDepotError
from ragdepot.core.http import APIError
from ragdepot.engine.pipeline import QueryPipeline
from ragdepot.logging.logger import get_logger
from ragdepot.logging.tags import CLI

logger = get_logger(__name__)

EXIT_COMMANDS = frozenset({"/exit", "/quit", "exit", "quit"})

HELP_TEXT = """/help                list commands
/prompt              toggle showing the full prompt
/settings            show current query settings
/import-settings     show import defaults for new collections
/collections         list collections
/collection <name>   switch collection
/status              show the current collection and models
/exit, /quit         leave the chat"""


@dataclass
class ChatSession:
    """Collection and pipeline the chat is currently bound to."""

    ctx: CLIContext
    collection: str
    pipeline: QueryPipeline

    @classmethod
    def open(cls, ctx: CLIContext, collection: str) -> "ChatSession":
        return cls(
            ctx=ctx,
            collection=collection,
            pipeline=build_pipeline(ctx, collection, ctx.settings.load_query),
        )

    def switch(self, name: str) -> None:
        """
        Rebind the chat to another existing collection.

        Raises:
            ConfigurationError: Invalid collection name.
            CollectionNotFoundError: No such collection on disk.
        """
        name = self.ctx.resolve_collection(name)
        if not self.ctx.collections.exists(name):
            raise CollectionNotFoundError(name)
        self.pipeline = build_pipeline(self.ctx, name, self.ctx.settings.load_query)
        self.collection = name
        logger.debug(f"{CLI} Chat switched to collection '{name}'")


# =============================================================================
# Slash commands
# =============================================================================


def _show_settings(session: ChatSession) -> None:
    settings = session.ctx.settings.load_query()
    ui.key_values((k, str(v)) for k, v in settings.model_dump().items())


def _show_import_settings(session: ChatSession) -> None:
    settings = session.ctx.settings.load_import()
    ui.key_values((k, str(v)) for k, v in settings.model_dump().items())


def _toggle_prompt(session: ChatSession) -> None:
    settings = session.ctx.settings.load_query()
    settings.show_prompt = not settings.show_prompt
    session.ctx.settings.save_query(settings)
    ui.success(f"Show prompt: {'on' if settings.show_prompt else 'off'}")


def _list_collections(session: ChatSession) -> None:
    infos = session.ctx.collections.list_collections()
    if not infos:
        ui.info("No collections found. Run 'ragdepot index' first.")
        return

    ui.table(
        ["Collection", "Embeddings", "Size", "Modified"],
        [
            (
                f"{i.name} *" if i.name == session.collection else i.name,
                str(i.embedding_count),
                format_bytes(i.file_size_bytes),
                i.last_modified.strftime("%Y-%m-%d %H:%M"),
            )
            for i in infos
        ],
    )
    ui.info("* current collection. Use /collection <name> to switch.")


def _switch_collection(session: ChatSession, name: str) -> None:
    if not name:
        ui.info(f"Current collection: {session.collection}")
        return
    if name == session.collection:
        ui.warning(f"Already using collection '{name}'")
        return

    session.switch(name)
    ui.success(f"Switched to collection '{session.collection}'")


def _show_status(session: ChatSession) -> None:
    ctx = session.ctx
    rows = [("Collection", session.collection)]
    if ctx.collections.exists(session.collection):
        info = ctx.collections.get_info(session.collection)
        rows.append(("Embeddings", str(info.embedding_count)))
    else:
        rows.append(("Embeddings", "0 (not indexed yet)"))
    rows += [
        ("Embedding model", ctx.embedding_model_for(session.collection)),
        ("Chat", ctx.chat_display),
    ]
    ui.key_values(rows, title="Status")


def _handle_slash(session: ChatSession, line: str) -> None:
    parts = line.split(maxsplit=1)
    cmd = parts[0].lower()
    arg = parts[1].strip() if len(parts) > 1 else ""

    if cmd == "/help":
        ui.panel(HELP_TEXT, title="Commands")
    elif cmd == "/prompt":
        _toggle_prompt(session)
    elif cmd in ("/settings", "/query-settings"):
        _show_settings(session)
    elif cmd == "/import-settings":
        _show_import_settings(session)
    elif cmd == "/collections":
        _list_collections(session)
    elif cmd == "/collection":
        _switch_collection(session, arg)
    elif cmd == "/status":
        _show_status(session)
    else:
        ui.warning(f"Unknown command: {cmd}", "type /help")


def command(collection: Optional[str] = None) -> None:
    """Interactive question/answer loop."""
    try:
        ctx = CLIContext.load()
        session = ChatSession.open(ctx, ctx.resolve_collection(collection))
    except (RagDepotError, APIError) as e:
        handle_cli_error(e)

    ui.header("ragdepot chat", f"Collection: {session.collection}  |  Chat: {ctx.chat_display}")
    ui.info("Type /help for commands, /exit to leave.")

    while True:
        try:
            line = ui.prompt_text("\n[bold]You[/bold]").strip()
        except (EOFError, KeyboardInterrupt):
            ui.print()
            break

        if not line:
            continue
        if line.lower() in EXIT_COMMANDS:
            break
        if line.startswith("/"):
            try:
                _handle_slash(session, line)
            except (RagDepotError, APIError) as e:
                show_error(e)
            continue

        try:
            answer = session.pipeline.query(line)
        except (MissingDataError, APIError) as e:
            show_error(e)
            continue
        except RagDepotError as e:
            handle_cli_error(e)

        logger.debug(f"{CLI} Answered with {len(answer.sources)} source(s)")
        display_answer(answer, show_prompt=ctx.settings.load_query().show_prompt)

    ui.info("Goodbye.")
