"""Test configuration for docscope."""

from __future__ import annotations

from typing import Any

import numpy as np
import pytest

from docscope.app import DocsApp
from docscope.configs import ApiService, DocscopeSettings, HashEmbeddingConfig
from docscope.embeddings.base import EmbeddingModel


SPEC_URL = "https://specs.example.com/marketplace.json"

SAMPLE_SPEC: dict[str, Any] = {
    "openapi": "3.0.0",
    "info": {
        "title": "Marketplace API",
        "version": "2.2",
        "description": "Organizations, programs, participants and transactions.",
    },
    "servers": [{"url": "https://api.example.com", "description": "Production"}],
    "tags": [{"name": "Webhooks"}, {"name": "Participants"}],
    "paths": {
        "/webhooks": {
            "get": {
                "operationId": "listWebhooks",
                "summary": "List webhooks",
                "tags": ["Webhooks"],
                "responses": {"200": {"description": "Webhook list"}},
            },
            "post": {
                "operationId": "createWebhook",
                "summary": "Create webhook subscription",
                "description": "Register a callback URL for program events.",
                "tags": ["Webhooks"],
                "requestBody": {
                    "content": {
                        "application/json": {
                            "schema": {"$ref": "#/components/schemas/Webhook"}
                        }
                    }
                },
                "responses": {"201": {"description": "Created"}},
            },
        },
        "/participants/{id}": {
            "parameters": [{"name": "id", "in": "path"}],
            "get": {
                "operationId": "getParticipant",
                "summary": "Get participant",
                "description": "Fetch a participant including the points balance.",
                "tags": ["Participants"],
                "parameters": [
                    {
                        "name": "id",
                        "in": "path",
                        "required": True,
                        "schema": {"type": "string"},
                        "description": "Participant id",
                    }
                ],
                "responses": {"200": {"description": "Participant"}},
            },
            "options": {"summary": "CORS preflight"},
        },
    },
    "components": {
        "securitySchemes": {
            "bearerAuth": {"type": "http", "scheme": "bearer", "description": "JWT"}
        },
        "schemas": {
            "Webhook": {
                "description": "A webhook subscription",
                "required": ["url"],
                "properties": {
                    "url": {"type": "string", "description": "Callback URL"},
                    "events": {"type": "array", "items": {"type": "string"}},
                },
            },
            "Participant": {
                "description": "A program participant",
                "properties": {
                    "id": {"type": "string"},
                    "points": {"type": "integer"},
                    "program": {"$ref": "#/components/schemas/Program"},
                },
            },
        },
    },
}

REPOS: list[dict[str, Any]] = [
    {
        "name": "webhook-relay",
        "description": "Relays marketplace webhook events to clients",
        "language": "PHP",
        "topics": ["webhook", "events"],
        "html_url": "https://github.com/acme/webhook-relay",
        "default_branch": "main",
    },
    {
        "name": "points-ledger",
        "description": "Participant points ledger service",
        "language": "TypeScript",
        "topics": ["points"],
        "html_url": "https://github.com/acme/points-ledger",
        "default_branch": "main",
    },
    {
        "name": "marketplace-api",
        "description": "Registry duplicate",
        "language": "PHP",
        "topics": [],
        "default_branch": "main",
    },
    {"name": "empty-repo", "description": None, "language": None, "topics": None},
]

FILES: dict[tuple[str, str], str] = {
    ("webhook-relay", "README.md"): (
        "# webhook-relay\n\n" + "Forwards webhook events. " * 200
    ),
    ("webhook-relay", "src/WebhookSigner.php"): (
        "<?php\n"
        "class WebhookSigner\n"
        "{\n"
        "    public function sign($payload)\n"
        "    {\n"
        "        return hash_hmac('sha256', $payload, $this->secret);\n"
        "    }\n"
        "}\n"
    ),
    ("points-ledger", "README.md"): "# points-ledger\n\nTracks participant points.",
}

TREES: dict[str, list[dict[str, Any]]] = {
    "webhook-relay": [
        {"path": "README.md", "type": "blob", "size": 5000},
        {"path": "src", "type": "tree"},
        {"path": "src/WebhookSigner.php", "type": "blob", "size": 180},
        {"path": "src/logo.png", "type": "blob", "size": 900},
        {"path": "tests/WebhookSignerTest.php", "type": "blob", "size": 300},
    ],
}


class FakeGitHubClient:
    """In-memory stand-in for ``GitHubClient``."""

    org = "acme"

    def __init__(
        self,
        repos: list[dict[str, Any]] | None = None,
        files: dict[tuple[str, str], str] | None = None,
        trees: dict[str, list[dict[str, Any]]] | None = None,
        *,
        fail_listing: bool = False,
    ):
        self.repos = REPOS if repos is None else repos
        self.files = FILES if files is None else files
        self.trees = TREES if trees is None else trees
        self.fail_listing = fail_listing
        self.calls: list[str] = []

    async def list_org_repos(self, org=None, *, type_="all", sort="updated", per_page=30):
        self.calls.append("list_org_repos")
        if self.fail_listing:
            msg = "403 rate limit exceeded"
            raise RuntimeError(msg)
        return list(self.repos)

    async def search_repositories(self, query, org=None, *, per_page=30):
        items = [r for r in self.repos if query in r["name"]]
        return {"total_count": len(items), "items": items}

    async def search_code(self, query, org=None, *, per_page=20, **qualifiers):
        self.calls.append(f"search_code:{query}")
        items = [
            {
                "path": path,
                "html_url": f"https://github.com/acme/{repo}/blob/main/{path}",
                "score": 1.0,
                "repository": {"name": repo, "owner": {"login": "acme"}},
            }
            for (repo, path), text in self.files.items()
            if any(word in text.lower() for word in query.lower().split())
        ]
        return {"total_count": len(items), "items": items[:per_page]}

    async def get_repo(self, repo, org=None):
        return next(r for r in self.repos if r["name"] == repo)

    async def get_languages(self, repo, org=None):
        return {"PHP": 1200}

    async def get_topics(self, repo, org=None):
        return list((await self.get_repo(repo, org)).get("topics") or [])

    async def get_tree(self, repo, org=None, *, branch=None):
        if repo not in self.trees:
            msg = f"404 Not Found: {repo}"
            raise RuntimeError(msg)
        return branch or "main", self.trees[repo]

    async def get_file_text(self, repo, path, org=None, *, branch=None):
        self.calls.append(f"get_file_text:{repo}/{path}")
        try:
            return self.files[repo, path]
        except KeyError:
            msg = f"404 Not Found: {repo}/{path}"
            raise RuntimeError(msg) from None


class FakeSpecLoader:
    """In-memory stand-in for ``SpecLoader``."""

    def __init__(self, specs: dict[str, dict[str, Any]] | None = None):
        self.specs = {SPEC_URL: SAMPLE_SPEC} if specs is None else specs
        self.loaded: list[str] = []

    async def load(self, url: str) -> dict[str, Any]:
        self.loaded.append(url)
        try:
            return self.specs[url]
        except KeyError:
            msg = f"Failed to fetch {url}"
            raise RuntimeError(msg) from None


class FailingEmbeddings(EmbeddingModel):
    """Embedder whose every call fails."""

    def __init__(self, dimensions: int = 16):
        self.dimensions = dimensions

    async def embed_query(self, query: str) -> np.ndarray:
        msg = "embedding service unavailable"
        raise ConnectionError(msg)


class StaticGenerator:
    """Answer generator returning a fixed text and recording its inputs."""

    def __init__(self, text: str = "Use POST /webhooks."):
        self.text = text
        self.calls: list[tuple[str, str]] = []

    async def generate(self, question: str, context: str) -> str:
        self.calls.append((question, context))
        return self.text


class FailingGenerator:
    async def generate(self, question: str, context: str) -> str:
        msg = "model overloaded"
        raise RuntimeError(msg)


@pytest.fixture
def sample_spec() -> dict[str, Any]:
    return SAMPLE_SPEC


@pytest.fixture
def services() -> dict[str, ApiService]:
    service = ApiService(
        name="Marketplace API",
        description="Core marketplace API for programs and participants",
        swagger_url=SPEC_URL,
        topics=["webhook", "participant", "points"],
    )
    return {"marketplace-api": service}


@pytest.fixture
def settings(services: dict[str, ApiService]) -> DocscopeSettings:
    return DocscopeSettings(
        _env_file=None,
        org_name="acme",
        swaggerhub_url=SPEC_URL,
        embedding=HashEmbeddingConfig(),
        services=services,
        readme_chars=500,
    )


@pytest.fixture
def github() -> FakeGitHubClient:
    return FakeGitHubClient()


@pytest.fixture
def spec_loader() -> FakeSpecLoader:
    return FakeSpecLoader()


@pytest.fixture
def app(settings, github, spec_loader) -> DocsApp:
    return DocsApp.from_settings(settings, github=github, spec_loader=spec_loader)
