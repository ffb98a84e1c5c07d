"""Embedding model interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from docscope.provider import BaseProvider


if TYPE_CHECKING:
    import numpy as np


class EmbeddingModel(BaseProvider, ABC):
    """Abstract interface for embedding models.

    Implementations produce vectors of a fixed length (``dimensions``), so
    everything embedded by one model can live in the same vector store.
    """

    dimensions: int

    @abstractmethod
    async def embed_query(self, query: str) -> np.ndarray:
        """Convert a single text to an embedding.

        Args:
            query: Text to convert

        Returns:
            Embedding vector of length ``dimensions``
        """

    async def embed_texts(self, texts: list[str]) -> list[np.ndarray]:
        """Convert texts to embeddings, one call per text.

        Args:
            texts: List of texts to convert to embeddings

        Returns:
            List of embedding vectors
        """
        return [await self.embed_query(text) for text in texts]
