# ragdepot/cli/commands/status.py
"""
Workspace and provider status.

Usage:
    ragdepot status            # configuration, credentials, collections
    ragdepot status --check    # also call the embedding and chat APIs once
"""

from __future__ import annotations

from ragdepot import __version__
from ragdepot.cli.context import CLIContext
from ragdepot.cli.errors import handle_cli_error
from ragdepot.cli.ui import ui
from ragdepot.config.schema import ProviderConfig
from ragdepot.core.exceptions import CredentialError, RagDepotError
from ragdepot.core.http import APIError
from ragdepot.core.paths import RagPaths
from ragdepot.llm.credentials import resolve_api_key

CHECK_TEXT = "ping"


def _credential_status(label: str, provider: ProviderConfig) -> bool:
    try:
        resolve_api_key(provider=provider.provider, config={"api_key": provider.api_key})
    except CredentialError as e:
        ui.status(f"{label} API key", False, str(e))
        return False
    ui.status(f"{label} API key", True, provider.provider)
    return True


def _check_connections(ctx: CLIContext, collection: str) -> bool:
    ok = True
    model = ctx.embedding_model_for(collection)
    try:
        vector = ctx.embedding_client(model).embed(CHECK_TEXT)
        ui.status("Embedding API", True, f"{model}, {len(vector)} dimensions")
    except (RagDepotError, APIError) as e:
        ui.status("Embedding API", False, str(e))
        ok = False

    try:
        ctx.completion_client().complete(CHECK_TEXT, 0.0, 100)
        ui.status("Chat API", True, ctx.chat_display)
    except (RagDepotError, APIError) as e:
        ui.status("Chat API", False, str(e))
        ok = False
    return ok


def command(check: bool = False) -> None:
    """Show configuration, credentials and collections."""
    ui.header(f"ragdepot {__version__}", "Status")

    try:
        ctx = CLIContext.load()
        collection = ctx.resolve_collection(None)
    except RagDepotError as e:
        handle_cli_error(e)

    ui.section("Workspace")
    ui.key_values(
        [
            ("Workspace", str(RagPaths.workspace())),
            ("Config", str(ctx.config_path) if ctx.has_user_config else "(package defaults)"),
            ("Documents path", ctx.config.documents_path),
            ("Active collection", collection),
        ]
    )

    ui.section("Providers")
    ui.key_values(
        [
            ("Embedding", f"{ctx.config.embedding.provider} ({ctx.embedding_model_for(collection)})"),
            ("Chat", ctx.chat_display),
        ]
    )
    creds_ok = _credential_status("Embedding", ctx.config.embedding)
    creds_ok = _credential_status("Chat", ctx.config.chat) and creds_ok

    ui.section("Collections")
    infos = ctx.collections.list_collections()
    if not infos:
        ui.info("No collections yet")
    for info in infos:
        ui.status(info.name, True, f"{info.embedding_count} embeddings")

    if check:
        ui.section("Connectivity")
        if not creds_ok or not _check_connections(ctx, collection):
            handle_cli_error(RagDepotError("One or more connectivity checks failed"))
