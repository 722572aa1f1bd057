# ragdepot/ingestion/reader/__init__.py
"""
Document readers: files on disk -> RawDocument text.
"""

from ragdepot.ingestion.reader.base import DocumentReader, Parser, RawDocument
from ragdepot.ingestion.reader.engine import FileSystemDocumentReader
from ragdepot.ingestion.reader.parsers import get_parser, supported_extensions

__all__ = [
    "DocumentReader",
    "Parser",
    "RawDocument",
    "FileSystemDocumentReader",
    "get_parser",
    "supported_extensions",
]
