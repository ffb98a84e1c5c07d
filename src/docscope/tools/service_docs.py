"""Resolving service names and fetching their documentation."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from docscope.common_types import RELEVANT_EXTENSIONS
from docscope.log import get_logger
from docscope.models import ApiSummaryDocument, RepositoryDocument
from docscope.openapi import extract_api_docs


if TYPE_CHECKING:
    from docscope.app import DocsApp
    from docscope.clients.github import GitHubClient
    from docscope.common_types import DocsMode
    from docscope.models import SearchResult


logger = get_logger(__name__)

MAX_FILES = 50
MAX_TOPIC_FILES = 5
MAX_FILE_CHARS = 2000


def _contains(needle: str, *texts: str | None) -> bool:
    return any(needle in (text or "").lower() for text in texts)


def _semantic_entry(result: SearchResult) -> dict[str, Any] | None:
    match result.document:
        case ApiSummaryDocument() as doc:
            entry = {"id": doc.service_id, "type": "api", "name": doc.name}
            entry |= {"description": doc.description, "topics": doc.topics}
        case RepositoryDocument() as doc:
            entry = {"id": doc.name, "type": "repository", "name": doc.name}
            entry |= {"description": doc.description, "language": doc.language}
            entry["topics"] = doc.topics
        case _:
            return None
    return entry | {"score": round(result.score, 4)}


async def resolve_service_id(
    app: DocsApp,
    service_name: str,
    *,
    semantic_k: int = 3,
) -> dict[str, Any]:
    """Find API services and repositories matching a name.

    Matching is a case-insensitive substring search over ids, names,
    descriptions and topics. When nothing matches, services with a positive
    embedding similarity are returned instead, each with its score.
    """
    needle = service_name.lower()
    services: list[dict[str, Any]] = []
    for service_id, service in app.services.items():
        texts = (service_id, service.name, service.description, *service.topics)
        if _contains(needle, *texts):
            services.append({
                "id": service_id,
                "type": "api",
                "name": service.name,
                "description": service.description,
                "topics": service.topics,
            })

    known = {s["id"] for s in services}
    for repo in await app.github.list_org_repos(per_page=100):
        name = repo["name"]
        if name in known:
            continue
        topics = repo.get("topics") or []
        if _contains(needle, name, repo.get("description"), *topics):
            services.append({
                "id": name,
                "type": "repository",
                "name": name,
                "description": repo.get("description"),
                "language": repo.get("language"),
                "topics": topics,
            })

    if not services and needle.strip():
        hits = await app.retriever.search_services(service_name, semantic_k)
        for hit in hits:
            entry = _semantic_entry(hit) if hit.score > 0 else None
            if entry is not None:
                services.append(entry)

    if services:
        hint = f"Use 'get-service-docs' with serviceId='{services[0]['id']}'"
        hint += " to fetch documentation"
    else:
        hint = "No matching services found. Try a different search term."
    return {
        "query": service_name,
        "count": len(services),
        "services": services,
        "hint": hint,
    }


async def _read_file(github: GitHubClient, repo: str, path: str) -> dict[str, Any]:
    content = await github.get_file_text(repo, path)
    return {
        "path": path,
        "content": content[:MAX_FILE_CHARS],
        "truncated": len(content) > MAX_FILE_CHARS,
    }


async def extract_repo_docs(
    github: GitHubClient,
    repo: str,
    topic: str | None = None,
    mode: DocsMode = "code",
) -> dict[str, Any]:
    """Readme, relevant files and (for a topic in code mode) matching file contents.

    A failing tree lookup is reported under ``error``; unreadable files are
    left out.
    """
    docs: dict[str, Any] = {"readme": None, "files": [], "code_snippets": []}
    try:
        docs["readme"] = await github.get_file_text(repo, "README.md")
    except Exception as e:  # noqa: BLE001
        logger.debug("No readme for %s: %s", repo, e)

    try:
        _, tree = await github.get_tree(repo)
    except Exception as e:  # noqa: BLE001
        docs["error"] = str(e)
        return docs

    relevant = [
        item
        for item in tree
        if item.get("type") == "blob" and item["path"].endswith(RELEVANT_EXTENSIONS)
    ]
    if topic and mode == "code":
        needle = topic.lower()
        matching = [f for f in relevant if needle in f["path"].lower()]
        results = await asyncio.gather(
            *(_read_file(github, repo, f["path"]) for f in matching[:MAX_TOPIC_FILES]),
            return_exceptions=True,
        )
        docs["code_snippets"] = [r for r in results if not isinstance(r, BaseException)]
    docs["files"] = [
        {"path": f["path"], "size": f.get("size")} for f in relevant[:MAX_FILES]
    ]
    return docs


async def get_service_docs(
    app: DocsApp,
    service_id: str,
    topic: str | None = None,
    mode: DocsMode = "code",
) -> dict[str, Any]:
    """Documentation of a registered API service or of a repository.

    Ids not found in the API service registry are treated as repository names.
    """
    service = app.services.get(service_id)
    if service is not None:
        spec = await app.spec_loader.load(service.swagger_url)
        return {
            "service_id": service_id,
            "service_name": service.name,
            "type": "api",
            "topic": topic or "overview",
            "mode": mode,
            "documentation": extract_api_docs(spec, topic, mode),
        }
    return {
        "service_id": service_id,
        "type": "repository",
        "topic": topic or "overview",
        "mode": mode,
        "documentation": await extract_repo_docs(app.github, service_id, topic, mode),
    }
