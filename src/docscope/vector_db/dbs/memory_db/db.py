"""In-memory vector store with exact cosine search."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from docscope.log import get_logger
from docscope.models import SearchResult
from docscope.vector_db.base import VectorStoreBackend
from docscope.vector_db.dbs.memory_db.utils import cosine_scores


if TYPE_CHECKING:
    from docscope.models import IndexedDocument


logger = get_logger(__name__)


class MemoryBackend(VectorStoreBackend):
    """Parallel lists of documents and embeddings, searched by linear scan.

    Search cost is O(n * d). This is meant for corpora of hundreds of
    documents (an organization's repositories plus one or two API specs).
    There is no approximate index, so results are exact and ties keep
    insertion order.

    The store is not locked. Callers mutating it from concurrent tasks must
    serialize those calls (``IndexContext`` does this for indexing).
    """

    def __init__(self, name: str = "default", dimensions: int | None = None):
        """Initialize the store.

        Args:
            name: Name used in log messages
            dimensions: Expected embedding length. Taken from the first added
                embedding when not given.
        """
        self.name = name
        self.dimensions = dimensions
        self._fixed_dimensions = dimensions is not None
        self._documents: list[IndexedDocument] = []
        self._embeddings: list[np.ndarray] = []
        self._matrix: np.ndarray | None = None

    def __len__(self) -> int:
        return len(self._documents)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, size={len(self)})"

    @property
    def documents(self) -> tuple[IndexedDocument, ...]:
        return tuple(self._documents)

    @property
    def embeddings(self) -> tuple[np.ndarray, ...]:
        return tuple(self._embeddings)

    def _validate(self, embedding: np.ndarray) -> np.ndarray:
        vector = np.asarray(embedding, dtype=np.float64)
        if vector.ndim != 1:
            msg = f"Embedding must be one-dimensional, got shape {vector.shape}"
            raise ValueError(msg)
        if self.dimensions is not None and vector.shape[0] != self.dimensions:
            msg = (
                f"Embedding has {vector.shape[0]} dimensions, "
                f"store {self.name!r} holds {self.dimensions}"
            )
            raise ValueError(msg)
        return vector

    async def add_document(
        self,
        document: IndexedDocument,
        embedding: np.ndarray,
    ) -> int:
        """Append a document and its embedding.

        Duplicates are allowed. The embedding is validated before either list
        is touched, so a rejected call leaves the store unchanged.

        Raises:
            ValueError: If the embedding length differs from the stored ones
        """
        vector = self._validate(embedding)
        if self.dimensions is None:
            self.dimensions = vector.shape[0]
        self._documents.append(document)
        self._embeddings.append(vector)
        self._matrix = None
        return len(self._documents) - 1

    async def search_vectors(
        self,
        query_vector: np.ndarray,
        k: int = 5,
    ) -> list[SearchResult]:
        """Return the ``k`` most similar documents, best first.

        An empty store or ``k <= 0`` gives an empty list.

        Raises:
            ValueError: If the query length differs from the stored embeddings
        """
        if not self._documents or k <= 0:
            return []
        query = self._validate(query_vector)
        if self._matrix is None:
            self._matrix = np.vstack(self._embeddings)
        scores = cosine_scores(self._matrix, query)
        order = np.argsort(-scores, kind="stable")[:k]
        return [
            SearchResult(document=self._documents[i], score=float(scores[i]))
            for i in order
        ]

    async def clear(self) -> None:
        """Remove all documents and embeddings."""
        logger.debug("Clearing store %s (%d documents)", self.name, len(self))
        self._documents = []
        self._embeddings = []
        self._matrix = None
        if not self._fixed_dimensions:
            self.dimensions = None
