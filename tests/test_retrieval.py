"""Tests for semantic search and question answering."""

from __future__ import annotations

import pytest

from conftest import FailingGenerator, FakeGitHubClient, FakeSpecLoader, StaticGenerator
from docscope.context import IndexContext
from docscope.embeddings import HashEmbeddings
from docscope.indexer import Indexer
from docscope.models import (
    ApiSummaryDocument,
    EndpointDocument,
    ReadmeDocument,
    RepositoryDocument,
    SchemaDocument,
)
from docscope.retrieval import (
    CONTEXT_SEPARATOR,
    NO_CONTEXT_ANSWER,
    NO_GENERATOR_NOTE,
    DocsRetriever,
    format_document,
)


def make_retriever(services, generator=None, github=None, spec_loader=None):
    context = IndexContext(embedder=HashEmbeddings())
    indexer = Indexer(
        context,
        github or FakeGitHubClient(),
        spec_loader or FakeSpecLoader(),
        services=services,
    )
    return DocsRetriever(context, indexer, generator)


@pytest.fixture
def empty_retriever() -> DocsRetriever:
    github = FakeGitHubClient(repos=[], files={}, trees={})
    return make_retriever({}, github=github, spec_loader=FakeSpecLoader(specs={}))


async def test_webhook_question_ranks_webhook_docs_first(services):
    retriever = make_retriever(services)
    results = await retriever.search_docs("how do I create a webhook subscription", k=3)
    top = results[0].document
    assert top.type in {"endpoint", "schema"}
    assert "webhook" in top.embedding_text().lower()
    assert results[0].score > results[-1].score


async def test_webhook_question_ranks_relay_repository_high(services):
    retriever = make_retriever(services)
    results = await retriever.search_services("webhook events relay", k=2)
    assert results[0].document.title == "webhook-relay"


async def test_search_indexes_lazily(services):
    retriever = make_retriever(services)
    assert not retriever.context.indexed
    await retriever.search_services("points")
    assert retriever.context.indexed


async def test_search_respects_k(services):
    retriever = make_retriever(services)
    assert len(await retriever.search_docs("participant", k=2)) == 2  # noqa: PLR2004
    assert len(await retriever.search_docs("participant", k=50)) == 7  # noqa: PLR2004
    assert await retriever.search_docs("participant", k=0) == []


async def test_scoped_search(services):
    retriever = make_retriever(services)
    services_only = await retriever.search("webhook", k=10, scope="services")
    assert {r.document.type for r in services_only} <= {"api", "repository"}
    docs_only = await retriever.search("webhook", k=10, scope="docs")
    assert {r.document.type for r in docs_only} <= {"endpoint", "schema", "readme"}


async def test_search_all_merges_by_score(services):
    retriever = make_retriever(services)
    results = await retriever.search("webhook subscription", k=4, scope="all")
    assert len(results) == 4  # noqa: PLR2004
    scores = [r.score for r in results]
    assert scores == sorted(scores, reverse=True)


async def test_empty_store_yields_no_results(empty_retriever):
    assert await empty_retriever.search_services("anything") == []
    assert await empty_retriever.search_docs("anything") == []


async def test_empty_store_answer(empty_retriever):
    answer = await empty_retriever.ask("How do webhooks work?")
    assert answer.answer == NO_CONTEXT_ANSWER
    assert answer.context == ""
    assert answer.sources == []
    assert answer.error is None


async def test_context_lists_services_before_docs(services):
    retriever = make_retriever(services)
    context, results = await retriever.build_context("webhook", service_k=2, docs_k=3)
    assert len(results) == 5  # noqa: PLR2004
    kinds = [r.document.type for r in results]
    assert set(kinds[:2]) <= {"api", "repository"}
    assert set(kinds[2:]) <= {"endpoint", "schema", "readme"}
    assert context.count(CONTEXT_SEPARATOR) == 4  # noqa: PLR2004


async def test_answer_without_generator_returns_context(services):
    retriever = make_retriever(services)
    answer = await retriever.ask("How do I create a webhook?")
    assert answer.answer.startswith(NO_GENERATOR_NOTE)
    assert answer.context in answer.answer
    assert answer.error is None
    assert len(answer.sources) == 8  # noqa: PLR2004
    assert {"type", "title", "score"} <= set(answer.sources[0])


async def test_answer_with_generator(services):
    generator = StaticGenerator("Send a POST request to /webhooks.")
    retriever = make_retriever(services, generator=generator)
    answer = await retriever.ask("How do I create a webhook?")
    assert answer.answer == "Send a POST request to /webhooks."
    [(question, context)] = generator.calls
    assert question == "How do I create a webhook?"
    assert context == answer.context
    assert "API Endpoint: POST /webhooks" in context


async def test_generator_failure_keeps_context(services):
    retriever = make_retriever(services, generator=FailingGenerator())
    answer = await retriever.ask("How do I create a webhook?")
    assert "model overloaded" in answer.error
    assert answer.context
    assert answer.context in answer.answer


async def test_retrieval_failure_is_reported(services):
    retriever = make_retriever(services)

    async def broken() -> bool:
        msg = "index unavailable"
        raise RuntimeError(msg)

    retriever.indexer.ensure_indexed = broken
    answer = await retriever.ask("anything")
    assert answer.error == "Retrieval failed: index unavailable"
    assert answer.sources == []


async def test_failed_sources_do_not_break_answers(services):
    retriever = make_retriever(services, spec_loader=FakeSpecLoader(specs={}))
    answer = await retriever.ask("Which repository relays webhook events?")
    assert answer.error is None
    assert "Repository: webhook-relay" in answer.context
    assert [e.source for e in retriever.context.errors][0] == "spec:marketplace-api"


@pytest.mark.parametrize(
    ("document", "expected"),
    [
        (
            ApiSummaryDocument(
                service_id="marketplace-api",
                name="Marketplace API",
                description="Core API",
                topics=["webhook", "sso"],
            ),
            "API Service: Marketplace API (marketplace-api)\n"
            "Description: Core API\n"
            "Topics: webhook, sso",
        ),
        (
            RepositoryDocument(name="points-ledger", language="TypeScript"),
            "Repository: points-ledger\nLanguage: TypeScript",
        ),
        (
            EndpointDocument(
                service_id="api",
                method="POST",
                path="/webhooks",
                summary="Create webhook subscription",
            ),
            "API Endpoint: POST /webhooks\nSummary: Create webhook subscription",
        ),
        (
            SchemaDocument(
                service_id="api", name="Webhook", properties=["url", "events"]
            ),
            "Schema: Webhook\nProperties: url, events",
        ),
        (
            ReadmeDocument(repo="webhook-relay", content="# webhook-relay"),
            "README (webhook-relay):\n# webhook-relay",
        ),
    ],
)
def test_format_document(document, expected: str):
    assert format_document(document) == expected


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
