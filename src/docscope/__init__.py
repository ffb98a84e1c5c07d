"""Semantic search and documentation tools for an organization's services."""

from docscope.app import DocsApp
from docscope.configs import DocscopeSettings
from docscope.context import IndexContext
from docscope.embeddings import (
    EmbeddingModel,
    HashEmbeddings,
    OpenAIEmbeddings,
    hash_embed,
)
from docscope.indexer import Indexer
from docscope.models import Answer, IndexedDocument, SearchResult
from docscope.retrieval import DocsRetriever
from docscope.vector_db import MemoryBackend, VectorStoreBackend, cosine_similarity

__version__ = "0.1.0"

__all__ = [
    "Answer",
    "DocsApp",
    "DocsRetriever",
    "DocscopeSettings",
    "EmbeddingModel",
    "HashEmbeddings",
    "IndexContext",
    "IndexedDocument",
    "Indexer",
    "MemoryBackend",
    "OpenAIEmbeddings",
    "SearchResult",
    "VectorStoreBackend",
    "cosine_similarity",
    "hash_embed",
]
