# ragdepot/engine/__init__.py
from ragdepot.engine.pipeline import QueryAnswer, QueryPipeline

__all__ = ["QueryPipeline", "QueryAnswer"]
