"""Vector store interface for indexed documents."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Sequence

    import numpy as np

    from docscope.models import IndexedDocument, SearchResult


class VectorStoreBackend(ABC):
    """Store pairing documents with their embeddings."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of stored documents."""

    @abstractmethod
    async def add_document(
        self,
        document: IndexedDocument,
        embedding: np.ndarray,
    ) -> int:
        """Add a single document.

        Args:
            document: Document to store
            embedding: Embedding of the document's text

        Returns:
            Position of the stored document
        """

    async def add_documents(
        self,
        documents: Sequence[IndexedDocument],
        embeddings: Sequence[np.ndarray],
    ) -> list[int]:
        """Add multiple documents.

        Args:
            documents: Documents to store
            embeddings: One embedding per document

        Returns:
            Positions of the stored documents

        Raises:
            ValueError: If documents and embeddings counts don't match
        """
        if len(documents) != len(embeddings):
            msg = "Number of documents and embeddings must match"
            raise ValueError(msg)
        return [
            await self.add_document(doc, emb)
            for doc, emb in zip(documents, embeddings, strict=True)
        ]

    @abstractmethod
    async def search_vectors(
        self,
        query_vector: np.ndarray,
        k: int = 5,
    ) -> list[SearchResult]:
        """Search for the documents most similar to a vector.

        Args:
            query_vector: Vector to search for
            k: Number of results to return

        Returns:
            Results ordered by descending score
        """

    @abstractmethod
    async def clear(self) -> None:
        """Remove all documents."""
