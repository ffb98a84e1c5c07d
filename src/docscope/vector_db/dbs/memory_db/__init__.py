"""In-memory vector store."""

from docscope.vector_db.dbs.memory_db.db import MemoryBackend
from docscope.vector_db.dbs.memory_db.utils import cosine_scores, cosine_similarity

__all__ = ["MemoryBackend", "cosine_scores", "cosine_similarity"]
