# ragdepot/__init__.py
"""
ragdepot - resumable document indexing and retrieval-augmented answering.

Index a folder of documents into a named collection of embeddings, then
ask questions answered from the closest chunks.
"""

__version__ = "0.3.0"
