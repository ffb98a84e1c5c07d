"""Tools for browsing and searching the organization's repositories."""

from __future__ import annotations

import asyncio
import re
from typing import TYPE_CHECKING, Any

from docscope.common_types import STOP_WORDS
from docscope.log import get_logger
from docscope.openapi import search_api_docs
from docscope.snippets import extract_snippets, number_lines


if TYPE_CHECKING:
    from docscope.clients.github import GitHubClient, RepoSort, RepoType
    from docscope.clients.openapi import SpecLoader
    from docscope.snippets import Snippet


logger = get_logger(__name__)

MAX_SNIPPETS = 3
FULL_FILE_LINES = 200
PUNCTUATION = re.compile(r"[?.,!]")


async def file_snippets(
    github: GitHubClient,
    repo: str,
    path: str,
    term: str,
    *,
    org: str | None = None,
    context_lines: int = 5,
) -> list[Snippet]:
    content = await github.get_file_text(repo, path, org)
    return extract_snippets(content, term, context_lines)


async def _with_snippets(
    github: GitHubClient,
    hit: dict[str, Any],
    term: str,
    org: str | None,
) -> dict[str, Any]:
    try:
        snippets = await file_snippets(github, hit["repo"], hit["path"], term, org=org)
    except Exception as e:  # noqa: BLE001
        logger.debug("No snippets for %s/%s: %s", hit["repo"], hit["path"], e)
        return {**hit, "snippets": []}
    return {**hit, "snippets": [s.to_dict() for s in snippets[:MAX_SNIPPETS]]}


def _code_hit(item: dict[str, Any]) -> dict[str, Any]:
    return {
        "repo": item["repository"]["name"],
        "path": item["path"],
        "url": item.get("html_url"),
        "score": item.get("score"),
    }


async def search_code(
    github: GitHubClient,
    query: str,
    *,
    org: str | None = None,
    language: str | None = None,
    filename: str | None = None,
    extension: str | None = None,
    path: str | None = None,
    per_page: int = 20,
    include_snippets: bool = True,
) -> dict[str, Any]:
    """Search code, attaching matching snippets to the first ten hits."""
    data = await github.search_code(
        query,
        org,
        language=language,
        filename=filename,
        extension=extension,
        path=path,
        per_page=per_page,
    )
    results = [_code_hit(item) for item in data.get("items", [])]
    if include_snippets:
        head = await asyncio.gather(
            *(_with_snippets(github, hit, query, org) for hit in results[:10])
        )
        results = [*head, *results[10:]]
    return {"total_count": data.get("total_count", 0), "results": results}


async def get_code_snippet(
    github: GitHubClient,
    repo: str,
    path: str,
    *,
    search_term: str | None = None,
    context_lines: int = 10,
    org: str | None = None,
) -> dict[str, Any]:
    """Snippets around a term, or the numbered start of the file without one."""
    content = await github.get_file_text(repo, path, org)
    if not search_term:
        lines = content.split("\n")
        return {
            "repo": repo,
            "path": path,
            "content": number_lines(lines[:FULL_FILE_LINES]),
            "truncated": len(lines) > FULL_FILE_LINES,
        }
    snippets = extract_snippets(content, search_term, context_lines)
    return {
        "repo": repo,
        "path": path,
        "search_term": search_term,
        "matches": len(snippets),
        "snippets": [s.to_dict() for s in snippets],
    }


async def search_repos(
    github: GitHubClient,
    query: str,
    *,
    org: str | None = None,
    per_page: int = 30,
) -> dict[str, Any]:
    data = await github.search_repositories(query, org, per_page=per_page)
    repos = [
        {
            "name": repo["name"],
            "full_name": repo.get("full_name"),
            "description": repo.get("description"),
            "url": repo.get("html_url"),
            "language": repo.get("language"),
            "stars": repo.get("stargazers_count"),
            "forks": repo.get("forks_count"),
            "updated_at": repo.get("updated_at"),
            "topics": repo.get("topics", []),
        }
        for repo in data.get("items", [])
    ]
    return {"total_count": data.get("total_count", 0), "repositories": repos}


async def list_repos(
    github: GitHubClient,
    *,
    org: str | None = None,
    type_: RepoType = "all",
    sort: RepoSort = "updated",
    per_page: int = 30,
) -> dict[str, Any]:
    data = await github.list_org_repos(org, type_=type_, sort=sort, per_page=per_page)
    repos = [
        {
            "name": repo["name"],
            "description": repo.get("description"),
            "private": repo.get("private"),
            "language": repo.get("language"),
            "topics": repo.get("topics", []),
            "updated_at": repo.get("updated_at"),
            "default_branch": repo.get("default_branch"),
        }
        for repo in data
    ]
    return {"count": len(repos), "repositories": repos}


async def get_repo_tree(
    github: GitHubClient,
    repo: str,
    *,
    org: str | None = None,
    branch: str | None = None,
    path: str | None = None,
) -> dict[str, Any]:
    """File tree of a branch, optionally limited to a path prefix."""
    branch, items = await github.get_tree(repo, org, branch=branch)
    if path:
        items = [item for item in items if item["path"].startswith(path)]
    tree = [
        {"path": item["path"], "type": item.get("type"), "size": item.get("size")}
        for item in items
    ]
    return {"branch": branch, "tree": tree}


async def get_file_content(
    github: GitHubClient,
    repo: str,
    path: str,
    *,
    org: str | None = None,
    branch: str | None = None,
) -> str:
    return await github.get_file_text(repo, path, org, branch=branch)


async def get_repo_metadata(
    github: GitHubClient,
    repo: str,
    *,
    org: str | None = None,
) -> dict[str, Any]:
    data, languages, topics = await asyncio.gather(
        github.get_repo(repo, org),
        github.get_languages(repo, org),
        github.get_topics(repo, org),
    )
    return {
        "name": data.get("name"),
        "full_name": data.get("full_name"),
        "description": data.get("description"),
        "url": data.get("html_url"),
        "private": data.get("private"),
        "default_branch": data.get("default_branch"),
        "created_at": data.get("created_at"),
        "updated_at": data.get("updated_at"),
        "pushed_at": data.get("pushed_at"),
        "stars": data.get("stargazers_count"),
        "forks": data.get("forks_count"),
        "open_issues": data.get("open_issues_count"),
        "languages": languages,
        "topics": topics,
        "license": (data.get("license") or {}).get("name"),
    }


def question_terms(question: str) -> list[str]:
    """Search terms of a question: lower-cased, stop words and short words removed."""
    words = PUNCTUATION.sub("", question.lower()).split()
    return [w for w in words if len(w) > 2 and w not in STOP_WORDS]  # noqa: PLR2004


async def ask(
    github: GitHubClient,
    loader: SpecLoader,
    question: str,
    *,
    swagger_url: str,
    org: str | None = None,
    language: str | None = None,
    include_code: bool = True,
    include_api_docs: bool = True,
    max_results: int = 10,
) -> dict[str, Any]:
    """Keyword search over source code and API docs for a question.

    A failure of either search is reported under ``code_error`` or
    ``api_error``; the other part of the response is still filled.
    """
    terms = question_terms(question)
    query = " ".join(terms[:5])
    response: dict[str, Any] = {
        "question": question,
        "search_terms": terms,
        "code_results": [],
        "api_results": {"endpoints": [], "schemas": []},
    }

    if include_code and query:
        try:
            data = await github.search_code(
                query, org, language=language, per_page=min(max_results, 15)
            )
            items = data.get("items", [])[:5]
            response["code_results"] = await asyncio.gather(*(
                _with_snippets(
                    github,
                    _code_hit(item),
                    terms[0],
                    item["repository"].get("owner", {}).get("login") or org,
                )
                for item in items
            ))
        except Exception as e:  # noqa: BLE001
            logger.warning("Code search failed: %s", e)
            response["code_error"] = str(e)

    if include_api_docs:
        try:
            spec = await loader.load(swagger_url)
            results = search_api_docs(spec, question)
            response["api_results"] = {
                "endpoints": results["endpoints"][:max_results],
                "schemas": results["schemas"][:5],
            }
        except Exception as e:  # noqa: BLE001
            logger.warning("API docs search failed: %s", e)
            response["api_error"] = str(e)

    n_code = len(response["code_results"])
    n_endpoints = len(response["api_results"]["endpoints"])
    n_schemas = len(response["api_results"]["schemas"])
    response["summary"] = (
        f"Found {n_code} code file(s), {n_endpoints} API endpoint(s), "
        f"and {n_schemas} schema(s) relevant to your question."
    )
    return response
