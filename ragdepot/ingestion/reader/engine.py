# ragdepot/ingestion/reader/engine.py
"""
Filesystem document reader.

Accepts a single file or a directory. Directories are scanned
non-recursively, files sorted by name so indexing order (and therefore
checkpoint boundaries) is deterministic between runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List

from ragdepot.core.exceptions import DocumentReadError
from ragdepot.ingestion.reader.base import RawDocument
from ragdepot.ingestion.reader.parsers import get_parser, supported_extensions
from ragdepot.logging.logger import get_logger
from ragdepot.logging.tags import INGEST

logger = get_logger(__name__)


@dataclass
class FileSystemDocumentReader:
    """
    Reads .txt, .md and .pdf documents from disk.

    Example:
        reader = FileSystemDocumentReader()
        docs = reader.read_documents("./documents")
    """

    recursive: bool = False

    def discover(self, path: str | Path) -> List[Path]:
        root = Path(path)
        if not root.exists():
            raise DocumentReadError("Documents path does not exist", path=root)

        if root.is_file():
            if get_parser(root) is None:
                raise DocumentReadError(
                    f"Unsupported file format: {root.suffix or '(none)'}. "
                    f"Supported formats: {', '.join(supported_extensions())}",
                    path=root,
                )
            return [root]

        candidates = root.rglob("*") if self.recursive else root.iterdir()
        files = sorted(p for p in candidates if p.is_file() and get_parser(p) is not None)
        logger.debug(f"{INGEST} Discovered {len(files)} supported file(s) in {root}")
        return files

    def read_document(self, path: Path) -> RawDocument:
        parser = get_parser(path)
        if parser is None:
            raise DocumentReadError(f"Unsupported file format: {path.suffix}", path=path)

        try:
            parsed = parser.parse(path)
            size = path.stat().st_size
        except DocumentReadError:
            raise
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentReadError(f"Failed to read document: {e}", path=path) from e

        return RawDocument(
            text=parsed.text,
            file_name=path.name,
            size_bytes=size,
            path=path,
            page_count=parsed.page_count,
        )

    def read_documents(self, path: str | Path) -> List[RawDocument]:
        documents = [self.read_document(p) for p in self.discover(path)]
        logger.info(f"{INGEST} Read {len(documents)} document(s) from {path}")
        return documents


__all__ = ["FileSystemDocumentReader"]
