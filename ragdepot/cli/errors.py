# ragdepot/cli/errors.py
"""
Error -> guidance mapping for CLI output.

Each entry matches an exception type, a message pattern, or both, and
carries the tips and follow-up commands shown to the user. The chain of
causes is searched innermost first, so an IndexingError caused by a
rate limit gets the rate-limit advice.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, NoReturn, Optional, Pattern, Tuple, Type

import typer

from ragdepot.cli.ui import ui
from ragdepot.core.exceptions import (
    CollectionNotFoundError,
    ConfigurationError,
    CredentialError,
    DocumentReadError,
    NoEmbeddingsError,
    NoRelevantContextError,
    StoreError,
)
from ragdepot.core.http import APIError, AuthenticationError, ModelNotFoundError, RateLimitError
from ragdepot.logging.logger import get_logger
from ragdepot.logging.tags import CLI

logger = get_logger(__name__)


@dataclass(frozen=True)
class ErrorGuidance:
    title: str
    message: str
    tips: Tuple[str, ...] = ()
    commands: Tuple[str, ...] = ()
    types: Tuple[Type[BaseException], ...] = ()
    pattern: Optional[Pattern[str]] = None

    def matches(self, error: BaseException) -> bool:
        if self.types and not isinstance(error, self.types):
            return False
        if self.pattern is not None and not self.pattern.search(str(error)):
            return False
        return bool(self.types or self.pattern)


GUIDANCE: List[ErrorGuidance] = [
    ErrorGuidance(
        title="Missing API Key",
        message="No API key is configured for the provider.",
        tips=(
            "Export OPENAI_API_KEY (or RAGDEPOT_API_KEY) in your shell",
            "Or set api_key under embedding/chat in .ragdepot/config.yaml",
        ),
        commands=("ragdepot status",),
        types=(CredentialError,),
    ),
    ErrorGuidance(
        title="API Authentication Failed",
        message="The API key was rejected.",
        tips=(
            "Check that the key is correct and has not expired",
            "Make sure there are no extra spaces or quotes around the key",
        ),
        commands=("ragdepot status --check",),
        types=(AuthenticationError,),
    ),
    ErrorGuidance(
        title="API Rate Limit Exceeded",
        message="The provider is throttling requests.",
        tips=(
            "Wait a few minutes before retrying",
            "Indexing resumes from the last checkpoint when re-run",
            "Lower checkpoint_interval to save progress more often",
        ),
        commands=("ragdepot settings import --checkpoint-interval 20",),
        types=(RateLimitError,),
    ),
    ErrorGuidance(
        title="Model Not Found",
        message="The provider does not know the configured model.",
        tips=(
            "Check the model name in .ragdepot/config.yaml and the import settings",
            "A collection keeps the embedding model it was created with",
        ),
        commands=("ragdepot settings show", "ragdepot collections info <name>"),
        types=(ModelNotFoundError,),
    ),
    ErrorGuidance(
        title="API Timeout",
        message="The API request took too long to complete.",
        tips=(
            "Try again, the API might be temporarily slow",
            "Raise timeout under embedding/chat in .ragdepot/config.yaml",
        ),
        commands=("ragdepot status --check",),
        types=(APIError,),
        pattern=re.compile(r"timed out|timeout", re.IGNORECASE),
    ),
    ErrorGuidance(
        title="Network Connectivity Issue",
        message="Unable to connect to the API server.",
        tips=(
            "Check your internet connection",
            "Check base_url in .ragdepot/config.yaml if you use a gateway",
            "HTTPS_PROXY is honoured if you are behind a proxy",
        ),
        commands=("ragdepot status --check",),
        types=(APIError,),
        pattern=re.compile(r"connection|connect|network", re.IGNORECASE),
    ),
    ErrorGuidance(
        title="No Embeddings Available",
        message="The collection has no embeddings to search.",
        tips=(
            "Index documents first",
            "Check that the collection name is correct",
        ),
        commands=("ragdepot index ./documents -c <name>", "ragdepot collections list"),
        types=(NoEmbeddingsError,),
    ),
    ErrorGuidance(
        title="No Relevant Context",
        message="Nothing in the collection could be compared with the question.",
        tips=(
            "The collection may have been built with a different embedding model",
            "Re-index into a new collection with the current model",
        ),
        commands=("ragdepot collections info <name>",),
        types=(NoRelevantContextError,),
    ),
    ErrorGuidance(
        title="Collection Not Found",
        message="The specified collection doesn't exist.",
        tips=("Collection names are case-sensitive",),
        commands=("ragdepot collections list",),
        types=(CollectionNotFoundError,),
    ),
    ErrorGuidance(
        title="Prompt Template Error",
        message="The configured prompt template could not be used.",
        tips=(
            "Templates live in .ragdepot/templates/<name>.txt",
            "Templates must contain {context} and {question} placeholders",
        ),
        commands=("ragdepot settings query --template default",),
        types=(ConfigurationError,),
        pattern=re.compile(r"template", re.IGNORECASE),
    ),
    ErrorGuidance(
        title="No Documents to Process",
        message="The documents path could not be read.",
        tips=(
            "Supported formats: .txt, .md, .markdown, .pdf",
            "Check that the path exists and is readable",
        ),
        types=(DocumentReadError,),
    ),
    ErrorGuidance(
        title="Collection File Error",
        message="A collection file could not be read or written.",
        tips=(
            "The file may have been edited by hand or truncated",
            "Delete the collection and re-index if it cannot be repaired",
        ),
        commands=("ragdepot collections list",),
        types=(StoreError,),
    ),
    ErrorGuidance(
        title="Invalid Configuration",
        message="One or more configuration values are invalid.",
        tips=(
            "chunk_overlap must be smaller than chunk_size",
            "top_k is 1-10, temperature 0-2, max_tokens 100-8000",
        ),
        commands=("ragdepot settings show",),
        types=(ConfigurationError,),
    ),
    ErrorGuidance(
        title="File Permission Error",
        message="A file or directory could not be accessed.",
        tips=("Check permissions on the documents folder and .ragdepot/",),
        types=(PermissionError,),
    ),
]


def _cause_chain(error: BaseException) -> List[BaseException]:
    chain: List[BaseException] = []
    current: Optional[BaseException] = error
    while current is not None and current not in chain:
        chain.append(current)
        current = current.__cause__
    return list(reversed(chain))


def guidance_for(error: BaseException) -> Optional[ErrorGuidance]:
    """Best guidance entry for the error or any of its causes."""
    for candidate in _cause_chain(error):
        for entry in GUIDANCE:
            if entry.matches(candidate):
                return entry
    return None


def show_error(error: BaseException) -> None:
    """Print the error and its guidance without exiting."""
    logger.debug(f"{CLI} Command failed", exc_info=error)
    ui.error(str(error))

    guidance = guidance_for(error)
    if guidance is None:
        return

    lines = [guidance.message]
    if guidance.tips:
        lines.append("")
        lines.extend(f"{i}. {tip}" for i, tip in enumerate(guidance.tips, 1))
    if guidance.commands:
        lines.append("")
        lines.append("Try:")
        lines.extend(f"  {cmd}" for cmd in guidance.commands)
    ui.panel("\n".join(lines), title=guidance.title, style="yellow")


def handle_cli_error(error: BaseException) -> NoReturn:
    show_error(error)
    raise typer.Exit(1)


__all__ = ["ErrorGuidance", "GUIDANCE", "guidance_for", "show_error", "handle_cli_error"]
