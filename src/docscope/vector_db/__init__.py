"""Vector storage."""

from docscope.vector_db.base import VectorStoreBackend
from docscope.vector_db.dbs.memory_db import MemoryBackend, cosine_similarity

__all__ = ["MemoryBackend", "VectorStoreBackend", "cosine_similarity"]
