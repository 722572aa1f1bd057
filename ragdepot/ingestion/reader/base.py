# ragdepot/ingestion/reader/base.py
"""
Reader contracts.

Flow: path -> DocumentReader.read_documents() -> [RawDocument]
      each file -> Parser (chosen by extension) -> text
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, List, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field


class RawDocument(BaseModel):
    """Plain text extracted from one source file."""

    text: str
    file_name: str
    size_bytes: int = Field(..., ge=0)
    path: Path
    page_count: Optional[int] = None


@dataclass
class ParsedText:
    """Parser output."""

    text: str
    page_count: Optional[int] = None


@runtime_checkable
class Parser(Protocol):
    """Extracts plain text from one file format."""

    plugin_name: str
    extensions: FrozenSet[str]

    def parse(self, path: Path) -> ParsedText: ...


@runtime_checkable
class DocumentReader(Protocol):
    """Reads every supported document under a path."""

    def read_documents(self, path: str | Path) -> List[RawDocument]: ...


__all__ = ["RawDocument", "ParsedText", "Parser", "DocumentReader"]
