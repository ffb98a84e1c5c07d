"""Async client for the GitHub REST API."""

from __future__ import annotations

import base64
from typing import Any, Literal
import urllib.parse

from docscope.common_types import DEFAULT_GITHUB_API_URL, DEFAULT_ORG_NAME
from docscope.log import get_logger


logger = get_logger(__name__)

RepoType = Literal["all", "public", "private", "forks", "sources"]
RepoSort = Literal["created", "updated", "pushed", "full_name"]


class GitHubClient:
    """Thin wrapper around the GitHub endpoints used by the tools.

    Methods return the decoded JSON payloads. Errors raised by the HTTP layer
    (non-2xx responses, connection failures) propagate to the caller.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        api_url: str = DEFAULT_GITHUB_API_URL,
        org: str = DEFAULT_ORG_NAME,
        user_agent: str = "docscope",
    ):
        """Initialize the client.

        Args:
            token: Optional token sent as bearer authorization
            api_url: Base URL of the API
            org: Organization used when a call does not name one
            user_agent: Value of the User-Agent header
        """
        self.api_url = api_url.rstrip("/")
        self.org = org
        self.headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": user_agent,
        }
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(api_url={self.api_url!r}, org={self.org!r})"

    async def request(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """GET an API endpoint and decode the JSON response."""
        import anyenv

        url = f"{self.api_url}{endpoint}"
        if params:
            url = f"{url}?{urllib.parse.urlencode(params)}"
        logger.debug("GET %s", url)
        return await anyenv.get_json(url, headers=self.headers)

    async def list_org_repos(
        self,
        org: str | None = None,
        *,
        type_: RepoType = "all",
        sort: RepoSort = "updated",
        per_page: int = 30,
    ) -> list[dict[str, Any]]:
        """List repositories of an organization."""
        params = {"type": type_, "sort": sort, "per_page": per_page}
        return await self.request(f"/orgs/{org or self.org}/repos", params)

    async def search_repositories(
        self,
        query: str,
        org: str | None = None,
        *,
        per_page: int = 30,
    ) -> dict[str, Any]:
        """Search repositories of an organization."""
        params = {"q": f"{query} org:{org or self.org}", "per_page": per_page}
        return await self.request("/search/repositories", params)

    async def search_code(
        self,
        query: str,
        org: str | None = None,
        *,
        language: str | None = None,
        filename: str | None = None,
        extension: str | None = None,
        path: str | None = None,
        per_page: int = 20,
    ) -> dict[str, Any]:
        """Search code across an organization using search qualifiers."""
        q = f"{query} org:{org or self.org}"
        qualifiers = {
            "language": language,
            "filename": filename,
            "extension": extension,
            "path": path,
        }
        for key, value in qualifiers.items():
            if value:
                q += f" {key}:{value}"
        return await self.request("/search/code", {"q": q, "per_page": per_page})

    async def get_repo(self, repo: str, org: str | None = None) -> dict[str, Any]:
        return await self.request(f"/repos/{org or self.org}/{repo}")

    async def get_languages(self, repo: str, org: str | None = None) -> dict[str, int]:
        return await self.request(f"/repos/{org or self.org}/{repo}/languages")

    async def get_topics(self, repo: str, org: str | None = None) -> list[str]:
        data = await self.request(f"/repos/{org or self.org}/{repo}/topics")
        return data.get("names", [])

    async def get_tree(
        self,
        repo: str,
        org: str | None = None,
        *,
        branch: str | None = None,
    ) -> tuple[str, list[dict[str, Any]]]:
        """Get the recursive file tree of a branch.

        Returns:
            Tuple of (branch name, tree entries). The default branch is looked
            up when no branch is given.
        """
        if not branch:
            repo_data = await self.get_repo(repo, org)
            branch = repo_data["default_branch"]
        endpoint = f"/repos/{org or self.org}/{repo}/git/trees/{branch}"
        data = await self.request(endpoint, {"recursive": 1})
        return branch, data.get("tree", [])

    async def get_contents(
        self,
        repo: str,
        path: str,
        org: str | None = None,
        *,
        branch: str | None = None,
    ) -> dict[str, Any]:
        params = {"ref": branch} if branch else None
        endpoint = f"/repos/{org or self.org}/{repo}/contents/{path}"
        return await self.request(endpoint, params)

    async def get_file_text(
        self,
        repo: str,
        path: str,
        org: str | None = None,
        *,
        branch: str | None = None,
    ) -> str:
        """Get the decoded text of a file.

        Raises:
            ValueError: If the path is not a file
        """
        data = await self.get_contents(repo, path, org, branch=branch)
        if not isinstance(data, dict) or data.get("type") != "file":
            msg = f"Path {path} is not a file"
            raise ValueError(msg)
        return base64.b64decode(data.get("content", "")).decode("utf-8", errors="replace")
