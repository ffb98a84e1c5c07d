"""State owned by one retrieval setup: stores, embedder and index status."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from docscope.log import get_logger
from docscope.models import IndexFailure
from docscope.vector_db import MemoryBackend


if TYPE_CHECKING:
    from docscope.embeddings.base import EmbeddingModel
    from docscope.vector_db.base import VectorStoreBackend


logger = get_logger(__name__)


@dataclass
class IndexContext:
    """Stores and index status shared by an indexer and a retriever.

    ``service_store`` holds API services and repositories, ``docs_store``
    holds endpoints, schemas and readme excerpts. Both are filled with
    vectors from ``embedder``, which is also used to embed queries.
    """

    embedder: EmbeddingModel
    service_store: VectorStoreBackend = field(
        default_factory=lambda: MemoryBackend("services")
    )
    docs_store: VectorStoreBackend = field(default_factory=lambda: MemoryBackend("docs"))
    indexed: bool = False
    errors: list[IndexFailure] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def record_failure(self, source: str, error: BaseException | str) -> None:
        """Remember a record which could not be indexed."""
        message = str(error) or type(error).__name__
        logger.warning("Skipping %s while indexing: %s", source, message)
        self.errors.append(IndexFailure(source=source, message=message))

    async def reset(self) -> None:
        """Drop all indexed documents and failures."""
        await self.service_store.clear()
        await self.docs_store.clear()
        self.errors.clear()
        self.indexed = False

    def stats(self) -> dict[str, Any]:
        return {
            "indexed": self.indexed,
            "embedder": repr(self.embedder),
            "services": len(self.service_store),
            "documents": len(self.docs_store),
            "errors": [{"source": e.source, "message": e.message} for e in self.errors],
        }
