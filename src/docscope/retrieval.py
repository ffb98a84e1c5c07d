"""Semantic search and question answering over the indexed stores."""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from docscope.log import get_logger
from docscope.models import (
    Answer,
    ApiSummaryDocument,
    EndpointDocument,
    ReadmeDocument,
    RepositoryDocument,
    SchemaDocument,
)


if TYPE_CHECKING:
    from docscope.common_types import SearchScope
    from docscope.context import IndexContext
    from docscope.generation import AnswerGenerator
    from docscope.indexer import Indexer
    from docscope.models import IndexedDocument, SearchResult
    from docscope.vector_db.base import VectorStoreBackend


logger = get_logger(__name__)

CONTEXT_SEPARATOR = "\n\n---\n\n"
NO_CONTEXT_ANSWER = "No relevant documentation was found for this question."
NO_GENERATOR_NOTE = (
    "Answer synthesis is not configured. Relevant documentation is listed below."
)


def _block(header: str, **fields: str | None) -> str:
    lines = [header]
    lines.extend(f"{label}: {value}" for label, value in fields.items() if value)
    return "\n".join(lines)


def format_document(document: IndexedDocument) -> str:
    """Render a document as a context block for answer synthesis."""
    match document:
        case ApiSummaryDocument():
            return _block(
                f"API Service: {document.name} ({document.service_id})",
                Description=document.description,
                Topics=", ".join(document.topics),
            )
        case RepositoryDocument():
            return _block(
                f"Repository: {document.name}",
                Language=document.language,
                Description=document.description,
                Topics=", ".join(document.topics),
            )
        case EndpointDocument():
            return _block(
                f"API Endpoint: {document.method} {document.path}",
                Summary=document.summary,
                Description=document.description,
            )
        case SchemaDocument():
            return _block(
                f"Schema: {document.name}",
                Description=document.description,
                Properties=", ".join(document.properties),
            )
        case ReadmeDocument():
            return f"README ({document.repo}):\n{document.content}"
        case _ as unreachable:
            assert_never(unreachable)


def source_entry(result: SearchResult) -> dict[str, object]:
    """Short reference to a document used in an answer."""
    return {
        "type": result.document.type,
        "title": result.document.title,
        "score": round(result.score, 4),
    }


class DocsRetriever:
    """Answers questions from the service and document stores.

    The first search triggers indexing. Queries are embedded with the
    context's embedder, so they share the stores' vector space.
    """

    def __init__(
        self,
        context: IndexContext,
        indexer: Indexer,
        generator: AnswerGenerator | None = None,
    ):
        """Initialize the retriever.

        Args:
            context: Context holding stores and embedder
            indexer: Indexer filling the context on first use
            generator: Optional answer generator. Without one, answers consist
                       of the retrieved context.
        """
        self.context = context
        self.indexer = indexer
        self.generator = generator

    async def _search(
        self,
        store: VectorStoreBackend,
        query: str,
        k: int,
    ) -> list[SearchResult]:
        await self.indexer.ensure_indexed()
        vector = await self.indexer.embed(query)
        return await store.search_vectors(vector, k=k)

    async def search_services(self, query: str, k: int = 5) -> list[SearchResult]:
        """Rank API services and repositories by similarity to the query."""
        return await self._search(self.context.service_store, query, k)

    async def search_docs(self, query: str, k: int = 5) -> list[SearchResult]:
        """Rank endpoints, schemas and readme excerpts by similarity to the query."""
        return await self._search(self.context.docs_store, query, k)

    async def search(
        self,
        query: str,
        k: int = 5,
        scope: SearchScope = "all",
    ) -> list[SearchResult]:
        """Search one or both stores.

        With scope ``all``, hits of both stores are merged by score; on equal
        scores, service hits come first.
        """
        match scope:
            case "services":
                return await self.search_services(query, k)
            case "docs":
                return await self.search_docs(query, k)
            case "all":
                hits = await self.search_services(query, k)
                hits += await self.search_docs(query, k)
                return sorted(hits, key=lambda r: r.score, reverse=True)[: max(k, 0)]
            case _ as unreachable:
                assert_never(unreachable)

    async def build_context(
        self,
        question: str,
        *,
        service_k: int = 3,
        docs_k: int = 5,
    ) -> tuple[str, list[SearchResult]]:
        """Collect the documents relevant to a question.

        Returns:
            Tuple of (formatted context, results it was built from). Service
            hits come first, then document hits.
        """
        results = await self.search_services(question, service_k)
        results += await self.search_docs(question, docs_k)
        context = CONTEXT_SEPARATOR.join(format_document(r.document) for r in results)
        return context, results

    async def answer(self, question: str, context: str) -> Answer:
        """Synthesize an answer from context, degrading to the raw context."""
        if not context.strip():
            return Answer(answer=NO_CONTEXT_ANSWER, context=context)
        if self.generator is None:
            return Answer(answer=f"{NO_GENERATOR_NOTE}\n\n{context}", context=context)
        try:
            text = await self.generator.generate(question, context)
        except Exception as e:
            logger.exception("Answer synthesis failed")
            error = f"Answer synthesis failed: {e}"
            return Answer(answer=f"{error}\n\n{context}", context=context, error=error)
        return Answer(answer=text, context=context)

    async def ask(self, question: str, *, service_k: int = 3, docs_k: int = 5) -> Answer:
        """Answer a question from the indexed documentation.

        Failures while indexing, retrieving or generating end up in
        ``Answer.error`` instead of being raised.
        """
        try:
            context, results = await self.build_context(
                question, service_k=service_k, docs_k=docs_k
            )
        except Exception as e:
            logger.exception("Retrieval failed")
            error = f"Retrieval failed: {e}"
            return Answer(answer=error, context="", error=error)
        answer = await self.answer(question, context)
        sources = [source_entry(r) for r in results]
        return answer.model_copy(update={"sources": sources})
