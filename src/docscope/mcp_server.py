"""MCP server exposing the documentation tools."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from fastmcp import FastMCP

from docscope.clients.github import RepoSort, RepoType  # noqa: TC001
from docscope.common_types import (  # noqa: TC001
    DocsMode,
    DocsTemplate,
    HttpMethod,
    SchemaFormat,
    SearchScope,
)
from docscope.log import get_logger
from docscope.tools import api_tools, rag_tools, repo_tools, service_docs


if TYPE_CHECKING:
    from docscope.app import DocsApp


logger = get_logger(__name__)

INSTRUCTIONS = (
    "Documentation and code search for an organization's services. Resolve a "
    "service name with 'resolve-service-id', then fetch its documentation with "
    "'get-service-docs'. Use 'ask_docs' for natural language questions and "
    "'search_code' to look at implementations."
)


def dump(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)


def create_server(app: DocsApp, name: str = "docscope") -> FastMCP:
    """Create an MCP server whose tools operate on ``app``.

    Tool errors propagate to the MCP runtime, which reports them to the
    client as error results.
    """
    server = FastMCP(name=name, instructions=INSTRUCTIONS)
    default_url = app.settings.swaggerhub_url

    @server.tool(name="resolve-service-id")
    async def resolve_service_id(service_name: str) -> str:
        """Find the id of an API service or repository by name or topic.

        Args:
            service_name: Service name or keyword to search for
        """
        return dump(await service_docs.resolve_service_id(app, service_name))

    @server.tool(name="get-service-docs")
    async def get_service_docs(
        service_id: str,
        topic: str | None = None,
        mode: DocsMode = "code",
    ) -> str:
        """Fetch documentation of a service, optionally focused on a topic.

        Args:
            service_id: Id returned by resolve-service-id
            topic: Topic to focus on (e.g. 'webhook', 'authentication')
            mode: 'code' for endpoint details, 'info' for summaries
        """
        return dump(await service_docs.get_service_docs(app, service_id, topic, mode))

    @server.tool()
    async def ask(
        question: str,
        search_code: bool = True,
        search_api_docs: bool = True,
        max_results: int = 10,
        language: str | None = None,
        swagger_url: str | None = None,
        org: str | None = None,
    ) -> str:
        """Keyword search over source code and API docs for a question."""
        result = await repo_tools.ask(
            app.github,
            app.spec_loader,
            question,
            swagger_url=swagger_url or default_url,
            org=org,
            language=language,
            include_code=search_code,
            include_api_docs=search_api_docs,
            max_results=max_results,
        )
        return dump(result)

    @server.tool(name="search_code")
    async def search_code_tool(
        query: str,
        language: str | None = None,
        filename: str | None = None,
        extension: str | None = None,
        path: str | None = None,
        per_page: int = 20,
        include_snippets: bool = True,
        org: str | None = None,
    ) -> str:
        """Search source code across the organization's repositories."""
        result = await repo_tools.search_code(
            app.github,
            query,
            org=org,
            language=language,
            filename=filename,
            extension=extension,
            path=path,
            per_page=per_page,
            include_snippets=include_snippets,
        )
        return dump(result)

    @server.tool(name="search_api_docs")
    async def search_api_docs_tool(query: str, swagger_url: str | None = None) -> str:
        """Keyword search over endpoints and schemas of an API."""
        url = swagger_url or default_url
        return dump(await api_tools.search_api_docs(app.spec_loader, url, query))

    @server.tool()
    async def get_code_snippet(
        repo: str,
        path: str,
        search_term: str | None = None,
        context_lines: int = 10,
        org: str | None = None,
    ) -> str:
        """Get numbered lines around a search term, or the start of a file."""
        result = await repo_tools.get_code_snippet(
            app.github,
            repo,
            path,
            search_term=search_term,
            context_lines=context_lines,
            org=org,
        )
        return dump(result)

    @server.tool()
    async def search_repos(query: str, per_page: int = 30, org: str | None = None) -> str:
        """Search the organization's repositories."""
        result = await repo_tools.search_repos(
            app.github, query, org=org, per_page=per_page
        )
        return dump(result)

    @server.tool()
    async def list_repos(
        type: RepoType = "all",  # noqa: A002
        sort: RepoSort = "updated",
        per_page: int = 30,
        org: str | None = None,
    ) -> str:
        """List the organization's repositories."""
        result = await repo_tools.list_repos(
            app.github, org=org, type_=type, sort=sort, per_page=per_page
        )
        return dump(result)

    @server.tool()
    async def get_repo_tree(
        repo: str,
        branch: str | None = None,
        path: str | None = None,
        org: str | None = None,
    ) -> str:
        """Get the file tree of a repository branch."""
        result = await repo_tools.get_repo_tree(
            app.github, repo, org=org, branch=branch, path=path
        )
        return dump(result)

    @server.tool()
    async def get_file_content(
        repo: str,
        path: str,
        branch: str | None = None,
        org: str | None = None,
    ) -> str:
        """Get the content of a file."""
        return await repo_tools.get_file_content(
            app.github, repo, path, org=org, branch=branch
        )

    @server.tool()
    async def get_repo_metadata(repo: str, org: str | None = None) -> str:
        """Get repository details, languages and topics."""
        return dump(await repo_tools.get_repo_metadata(app.github, repo, org=org))

    @server.tool()
    async def parse_openapi(url: str | None = None, include_schemas: bool = True) -> str:
        """Summarize an OpenAPI document: info, servers, paths, tags and schemas."""
        url = url or default_url
        return dump(await api_tools.parse_openapi(app.spec_loader, url, include_schemas))

    @server.tool()
    async def extract_endpoints(
        url: str | None = None,
        tag: str | None = None,
        method: HttpMethod | None = None,
    ) -> str:
        """List the endpoints of an OpenAPI document."""
        result = await api_tools.extract_endpoints(
            app.spec_loader, url or default_url, tag=tag, method=method
        )
        return dump(result)

    @server.tool()
    async def extract_schemas(
        url: str | None = None,
        schema_name: str | None = None,
        format: SchemaFormat = "markdown",  # noqa: A002
    ) -> str:
        """Render schemas of an OpenAPI document as markdown, TypeScript or JSON."""
        return await api_tools.extract_schemas(
            app.spec_loader, url or default_url, schema_name=schema_name, fmt=format
        )

    @server.tool()
    async def generate_markdown_docs(
        url: str | None = None,
        template: DocsTemplate = "default",
    ) -> str:
        """Generate a markdown reference of an OpenAPI document."""
        url = url or default_url
        return await api_tools.generate_markdown_docs(app.spec_loader, url, template)

    @server.tool()
    async def semantic_search(query: str, scope: SearchScope = "all", k: int = 5) -> str:
        """Rank indexed services and documents by semantic similarity."""
        return dump(await rag_tools.semantic_search(app, query, scope=scope, k=k))

    @server.tool()
    async def ask_docs(question: str, k: int = 5) -> str:
        """Answer a question from the indexed documentation."""
        return dump(await rag_tools.ask_docs(app, question, k=k))

    logger.debug("Created MCP server %r", name)
    return server
