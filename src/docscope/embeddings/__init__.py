"""Embedding strategies."""

from docscope.embeddings.base import EmbeddingModel
from docscope.embeddings.hash_provider import HashEmbeddings, hash_embed
from docscope.embeddings.openai_provider import OpenAIEmbeddings

__all__ = ["EmbeddingModel", "HashEmbeddings", "OpenAIEmbeddings", "hash_embed"]
