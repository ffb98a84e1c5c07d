"""Wiring of clients, stores and retrieval for one configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from docscope.clients import GitHubClient, SpecLoader
from docscope.configs.settings import DocscopeSettings
from docscope.context import IndexContext
from docscope.generation import LLMAnswerGenerator
from docscope.indexer import Indexer
from docscope.log import get_logger
from docscope.retrieval import DocsRetriever


if TYPE_CHECKING:
    from docscope.configs.settings import ApiService
    from docscope.generation import AnswerGenerator


logger = get_logger(__name__)


@dataclass
class DocsApp:
    """Everything the tools need, built from one settings object."""

    settings: DocscopeSettings
    github: GitHubClient
    spec_loader: SpecLoader
    context: IndexContext
    indexer: Indexer
    retriever: DocsRetriever

    @property
    def services(self) -> dict[str, ApiService]:
        return self.indexer.services

    @classmethod
    def from_settings(
        cls,
        settings: DocscopeSettings | None = None,
        *,
        github: GitHubClient | None = None,
        spec_loader: SpecLoader | None = None,
        generator: AnswerGenerator | None = None,
    ) -> DocsApp:
        """Create an app, building any collaborator not passed in."""
        settings = settings or DocscopeSettings()
        if github is None:
            token = settings.github_token
            github = GitHubClient(
                token.get_secret_value() if token else None,
                api_url=settings.github_api_url,
                org=settings.org_name,
            )
        if spec_loader is None:
            key = settings.swaggerhub_api_key
            spec_loader = SpecLoader(key.get_secret_value() if key else None)
        answer_config = settings.get_answer_config()
        if generator is None and answer_config is not None:
            if missing := LLMAnswerGenerator.missing_packages():
                logger.warning(
                    "answer_model is set but %s is not installed, "
                    "answers will contain raw context",
                    ", ".join(missing),
                )
            else:
                generator = answer_config.get_provider()
        context = IndexContext(embedder=settings.create_embedding_model())
        indexer = Indexer(
            context,
            github,
            spec_loader,
            services=settings.api_services(),
            readme_chars=settings.readme_chars,
            max_readmes=settings.max_readmes,
        )
        retriever = DocsRetriever(context, indexer, generator)
        return cls(
            settings=settings,
            github=github,
            spec_loader=spec_loader,
            context=context,
            indexer=indexer,
            retriever=retriever,
        )
