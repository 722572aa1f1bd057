# ragdepot/retrieval/__init__.py
from ragdepot.retrieval.search import VectorSearch, cosine_similarity, search

__all__ = ["VectorSearch", "cosine_similarity", "search"]
