# ragdepot/logging/tags.py
"""
Subsystem tags prefixed to log messages.

Changing a tag here updates it project-wide.
"""

INGEST = "[INGEST]"
CHUNKING = "[CHUNKING]"
STORAGE = "[STORAGE]"
EMBEDDING = "[EMBEDDING]"
CHAT = "[CHAT]"
VECTOR_SEARCH = "[VECTOR_SEARCH]"
PROMPT = "[PROMPT]"
PIPELINE = "[PIPELINE]"
CONFIG = "[CONFIG]"
CLI = "[CLI]"
