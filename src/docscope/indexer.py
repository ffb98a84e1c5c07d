"""Populating the vector stores from GitHub and OpenAPI sources."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import numpy as np

from docscope.log import get_logger
from docscope.models import (
    ApiSummaryDocument,
    EndpointDocument,
    ReadmeDocument,
    RepositoryDocument,
    SchemaDocument,
)
from docscope.openapi.extract import (
    as_dict,
    as_list,
    as_text,
    get_schemas,
    iter_operations,
)


if TYPE_CHECKING:
    from docscope.clients.github import GitHubClient
    from docscope.clients.openapi import SpecLoader
    from docscope.configs.settings import ApiService
    from docscope.context import IndexContext
    from docscope.models import IndexedDocument
    from docscope.vector_db.base import VectorStoreBackend


logger = get_logger(__name__)

README_PATH = "README.md"


class Indexer:
    """Builds the service and document stores of an ``IndexContext``.

    Indexing happens once, on first use. Failures of single sources (an
    unreachable spec, a missing readme) are recorded in the context and
    skipped; everything else still gets indexed.
    """

    def __init__(
        self,
        context: IndexContext,
        github: GitHubClient,
        spec_loader: SpecLoader,
        *,
        services: dict[str, ApiService] | None = None,
        readme_chars: int = 2000,
        max_readmes: int = 20,
    ):
        """Initialize the indexer.

        Args:
            context: Context owning the stores to fill
            github: Client used to list repositories and fetch readmes
            spec_loader: Loader for the API services' specs
            services: Registry of API services
            readme_chars: Readme excerpts are truncated to this length
            max_readmes: Maximum number of readmes to fetch
        """
        self.context = context
        self.github = github
        self.spec_loader = spec_loader
        self.services = services or {}
        self.readme_chars = readme_chars
        self.max_readmes = max_readmes

    async def ensure_indexed(self) -> bool:
        """Index all sources unless that already happened.

        Concurrent callers wait for the first one, so documents are added once.

        Returns:
            True if this call performed the indexing
        """
        if self.context.indexed:
            return False
        async with self.context.lock:
            if self.context.indexed:
                return False
            await self._rebuild()
            return True

    async def reindex(self) -> None:
        """Clear both stores and index all sources again."""
        async with self.context.lock:
            await self._rebuild()

    async def _rebuild(self) -> None:
        await self.context.reset()
        await self._build()
        self.context.indexed = True

    async def _build(self) -> None:
        ctx = self.context
        logger.info("Indexing sources with %r", ctx.embedder)
        await self._index_services()
        repos = await self._index_repositories()
        await self._index_specs()
        await self._index_readmes(repos)
        logger.info(
            "Indexed %d services and %d documents (%d failures)",
            len(ctx.service_store),
            len(ctx.docs_store),
            len(ctx.errors),
        )

    async def embed(self, text: str) -> np.ndarray:
        """Embed text, degrading to a zero vector if the embedder fails."""
        embedder = self.context.embedder
        try:
            return await embedder.embed_query(text)
        except Exception:
            logger.exception("Embedding failed, storing zero vector")
            return np.zeros(embedder.dimensions)

    async def _add(self, store: VectorStoreBackend, document: IndexedDocument) -> None:
        embedding = await self.embed(document.embedding_text())
        await store.add_document(document, embedding)

    async def _index_services(self) -> None:
        for service_id, service in self.services.items():
            doc = ApiSummaryDocument(
                service_id=service_id,
                name=service.name,
                description=service.description,
                topics=list(service.topics),
                swagger_url=service.swagger_url,
            )
            await self._add(self.context.service_store, doc)

    async def _index_repositories(self) -> list[RepositoryDocument]:
        try:
            listing = await self.github.list_org_repos(per_page=100)
        except Exception as e:  # noqa: BLE001
            self.context.record_failure("repositories", e)
            return []
        repos = []
        for raw in as_list(listing):
            raw = as_dict(raw)
            name = raw.get("name")
            if not name or str(name) in self.services:
                continue
            try:
                doc = repository_document(raw)
            except ValueError as e:
                self.context.record_failure(f"repository:{name}", e)
                continue
            await self._add(self.context.service_store, doc)
            repos.append(doc)
        return repos

    async def _index_specs(self) -> None:
        for service_id, service in self.services.items():
            try:
                spec = await self.spec_loader.load(service.swagger_url)
                docs = spec_documents(service_id, as_dict(spec))
            except Exception as e:  # noqa: BLE001
                self.context.record_failure(f"spec:{service_id}", e)
                continue
            for doc in docs:
                await self._add(self.context.docs_store, doc)

    async def _fetch_readme(self, repo: str) -> str:
        return await self.github.get_file_text(repo, README_PATH)

    async def _index_readmes(self, repos: list[RepositoryDocument]) -> None:
        selected = repos[: self.max_readmes]
        texts = await asyncio.gather(
            *(self._fetch_readme(repo.name) for repo in selected),
            return_exceptions=True,
        )
        for repo, text in zip(selected, texts, strict=True):
            if isinstance(text, BaseException):
                self.context.record_failure(f"readme:{repo.name}", text)
                continue
            if not text.strip():
                continue
            doc = ReadmeDocument(repo=repo.name, content=text[: self.readme_chars])
            await self._add(self.context.docs_store, doc)


def _optional_text(value: Any) -> str | None:
    return None if value is None else str(value)


def repository_document(raw: dict[str, Any]) -> RepositoryDocument:
    """Build a repository document from a GitHub repository payload.

    Scalar fields of unexpected types are converted to text.
    """
    return RepositoryDocument(
        name=str(raw["name"]),
        description=as_text(raw.get("description")),
        language=_optional_text(raw.get("language")),
        topics=[str(t) for t in as_list(raw.get("topics"))],
        url=_optional_text(raw.get("html_url")),
    )


def spec_documents(
    service_id: str, spec: dict[str, Any]
) -> list[EndpointDocument | SchemaDocument]:
    """Build endpoint and schema documents from an OpenAPI document.

    Scalar fields of unexpected types (numbers, dates) are converted to text.
    """
    docs: list[EndpointDocument | SchemaDocument] = [
        EndpointDocument(
            service_id=service_id,
            method=method.upper(),
            path=str(path),
            summary=as_text(operation.get("summary")),
            description=as_text(operation.get("description")),
            tags=[str(t) for t in as_list(operation.get("tags"))],
            operation_id=_optional_text(operation.get("operationId")),
        )
        for path, method, operation in iter_operations(spec)
    ]
    for name, schema in get_schemas(spec).items():
        schema = as_dict(schema)
        doc = SchemaDocument(
            service_id=service_id,
            name=str(name),
            description=as_text(schema.get("description")),
            properties=[str(p) for p in as_dict(schema.get("properties"))],
            required=[str(r) for r in as_list(schema.get("required"))],
        )
        docs.append(doc)
    return docs
