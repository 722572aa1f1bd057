# ragdepot/storage/__init__.py
"""
Durable, human-inspectable persistence for collections.
"""

from ragdepot.storage.collections import CollectionInfo, CollectionManager
from ragdepot.storage.store import JsonEmbeddingStore, write_chunks_file

__all__ = ["JsonEmbeddingStore", "write_chunks_file", "CollectionManager", "CollectionInfo"]
