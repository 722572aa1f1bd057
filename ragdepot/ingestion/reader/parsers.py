# ragdepot/ingestion/reader/parsers.py
"""
Per-format text extraction.

One parser per format, selected by file extension through the
registry at the bottom of this module:

    .txt / .text        -> PlainTextParser
    .md / .markdown     -> MarkdownParser (stripped to plain text)
    .pdf                -> PdfParser (pypdf)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from ragdepot.core.exceptions import DocumentReadError
from ragdepot.ingestion.reader.base import ParsedText, Parser
from ragdepot.logging.logger import get_logger
from ragdepot.logging.tags import INGEST

logger = get_logger(__name__)


def read_text_file(path: Path) -> str:
    """
    Read a text file, honouring UTF-8/UTF-16 byte order marks.

    Falls back to latin-1 when the bytes are not valid UTF-8.
    """
    raw = path.read_bytes()

    if raw.startswith(b"\xef\xbb\xbf"):
        return raw[3:].decode("utf-8", errors="replace")
    if raw.startswith(b"\xff\xfe"):
        return raw[2:].decode("utf-16-le")
    if raw.startswith(b"\xfe\xff"):
        return raw[2:].decode("utf-16-be")

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning(f"{INGEST} {path.name} is not valid UTF-8, decoding as latin-1")
        return raw.decode("latin-1")


# =============================================================================
# Parsers
# =============================================================================


@dataclass
class PlainTextParser:
    plugin_name: str = field(default="plaintext", repr=False)
    extensions: FrozenSet[str] = frozenset({".txt", ".text"})

    def parse(self, path: Path) -> ParsedText:
        return ParsedText(text=read_text_file(path))


_MD_FENCE = re.compile(r"^\s*(```|~~~).*$", re.MULTILINE)
_MD_IMAGE = re.compile(r"!\[([^\]]*)\]\([^)]*\)")
_MD_LINK = re.compile(r"\[([^\]]+)\]\([^)]*\)")
_MD_REF_DEF = re.compile(r"^\s*\[[^\]]+\]:\s+\S+.*$", re.MULTILINE)
_MD_HEADING = re.compile(r"^\s{0,3}#{1,6}\s+", re.MULTILINE)
_MD_SETEXT = re.compile(r"^\s*(=+|-+)\s*$", re.MULTILINE)
_MD_BLOCKQUOTE = re.compile(r"^\s*>\s?", re.MULTILINE)
_MD_LIST = re.compile(r"^(\s*)([-*+]|\d+[.)])\s+", re.MULTILINE)
_MD_HR = re.compile(r"^\s*([-*_]\s*){3,}$", re.MULTILINE)
_MD_EMPHASIS = re.compile(r"(\*\*|\*|~~)(?=\S)(.+?)(?<=\S)\1")
_MD_UNDERSCORE = re.compile(r"(?<!\w)(__|_)(?=\S)(.+?)(?<=\S)\1(?!\w)")
_MD_INLINE_CODE = re.compile(r"`([^`]*)`")
_MD_HTML = re.compile(r"<[^>]+>")
_BLANK_RUNS = re.compile(r"\n{3,}")


def strip_markdown(markdown: str) -> str:
    """Reduce Markdown to readable plain text (keeps code block contents)."""
    text = _MD_FENCE.sub("", markdown)
    text = _MD_IMAGE.sub(r"\1", text)
    text = _MD_LINK.sub(r"\1", text)
    text = _MD_REF_DEF.sub("", text)
    text = _MD_HR.sub("", text)
    text = _MD_HEADING.sub("", text)
    text = _MD_SETEXT.sub("", text)
    text = _MD_BLOCKQUOTE.sub("", text)
    text = _MD_LIST.sub(r"\1", text)
    text = _MD_EMPHASIS.sub(r"\2", text)
    text = _MD_UNDERSCORE.sub(r"\2", text)
    text = _MD_INLINE_CODE.sub(r"\1", text)
    text = _MD_HTML.sub("", text)
    text = _BLANK_RUNS.sub("\n\n", text)
    return text.strip()


@dataclass
class MarkdownParser:
    plugin_name: str = field(default="markdown", repr=False)
    extensions: FrozenSet[str] = frozenset({".md", ".markdown"})

    def parse(self, path: Path) -> ParsedText:
        return ParsedText(text=strip_markdown(read_text_file(path)))


@dataclass
class PdfParser:
    """Text layer extraction via pypdf; pages joined by blank lines."""

    plugin_name: str = field(default="pdf", repr=False)
    extensions: FrozenSet[str] = frozenset({".pdf"})

    def parse(self, path: Path) -> ParsedText:
        try:
            reader = PdfReader(path)
            pages = [page.extract_text() or "" for page in reader.pages]
        except PdfReadError as e:
            raise DocumentReadError(f"Invalid PDF: {e}", path=path) from e

        text = "\n\n".join(p for p in pages if p.strip())
        if not text:
            logger.warning(f"{INGEST} {path.name} has no extractable text layer")
        return ParsedText(text=text, page_count=len(pages))


# =============================================================================
# Registry
# =============================================================================

_PARSERS: List[Parser] = [PlainTextParser(), MarkdownParser(), PdfParser()]
_BY_EXTENSION: Dict[str, Parser] = {ext: p for p in _PARSERS for ext in p.extensions}


def supported_extensions() -> List[str]:
    return sorted(_BY_EXTENSION)


def get_parser(path: Path) -> Optional[Parser]:
    """Parser for the file's extension, or None if unsupported."""
    return _BY_EXTENSION.get(path.suffix.lower())


__all__ = [
    "PlainTextParser",
    "MarkdownParser",
    "PdfParser",
    "strip_markdown",
    "read_text_file",
    "get_parser",
    "supported_extensions",
]
