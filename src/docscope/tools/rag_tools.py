"""Tools backed by the embedding index."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from docscope.app import DocsApp
    from docscope.common_types import SearchScope


async def semantic_search(
    app: DocsApp,
    query: str,
    *,
    scope: SearchScope = "all",
    k: int = 5,
) -> dict[str, Any]:
    """Rank indexed documents by similarity to a query."""
    results = await app.retriever.search(query, k=k, scope=scope)
    return {
        "query": query,
        "scope": scope,
        "count": len(results),
        "results": [r.to_dict() for r in results],
    }


async def ask_docs(app: DocsApp, question: str, *, k: int = 5) -> dict[str, Any]:
    """Answer a question from the indexed documentation."""
    answer = await app.retriever.ask(question, docs_k=k)
    return {"question": question, **answer.model_dump()}
