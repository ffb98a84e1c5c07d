"""Command line interface for docscope."""

from __future__ import annotations

import json
from typing import Any

import typer

from docscope.log import configure_logging, get_logger


cli = typer.Typer(help="Docscope documentation search CLI", no_args_is_help=True)

logger = get_logger(__name__)


def _app():
    from docscope.app import DocsApp

    return DocsApp.from_settings()


def _run(coro) -> Any:
    import anyenv

    return anyenv.run_sync(coro)


def _echo(data: Any) -> None:
    typer.echo(data if isinstance(data, str) else json.dumps(data, indent=2, default=str))


@cli.callback()
def setup(
    log_level: str = typer.Option("warning", help="Log level"),
):
    """Search and answer questions about an organization's services."""
    configure_logging(log_level)


@cli.command()
def resolve(service_name: str = typer.Argument(..., help="Service name or keyword")):
    """Find API services and repositories matching a name."""
    from docscope.tools.service_docs import resolve_service_id

    _echo(_run(resolve_service_id(_app(), service_name)))


@cli.command()
def docs(
    service_id: str = typer.Argument(..., help="Service id or repository name"),
    topic: str | None = typer.Option(None, help="Topic to focus on"),
    mode: str = typer.Option("code", help="'code' or 'info'"),
):
    """Show documentation of a service."""
    from docscope.tools.service_docs import get_service_docs

    if mode not in ("code", "info"):
        typer.echo(f"Error: Invalid mode '{mode}'. Choose from: code, info")
        raise typer.Exit(1)
    result = get_service_docs(_app(), service_id, topic, mode)  # type: ignore[arg-type]
    _echo(_run(result))


@cli.command()
def ask(
    question: str = typer.Argument(..., help="Question to answer"),
    k: int = typer.Option(5, help="Number of documents to retrieve"),
):
    """Answer a question from the indexed documentation."""
    from docscope.tools.rag_tools import ask_docs

    result = _run(ask_docs(_app(), question, k=k))
    typer.echo(result["answer"])
    if result["error"]:
        logger.warning("Answer incomplete: %s", result["error"])


@cli.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    scope: str = typer.Option("all", help="'all', 'services' or 'docs'"),
    k: int = typer.Option(5, help="Number of results"),
):
    """Rank indexed documents by semantic similarity."""
    from docscope.tools.rag_tools import semantic_search

    if scope not in ("all", "services", "docs"):
        typer.echo(f"Error: Invalid scope '{scope}'. Choose from: all, services, docs")
        raise typer.Exit(1)
    result = semantic_search(_app(), query, scope=scope, k=k)  # type: ignore[arg-type]
    _echo(_run(result))


@cli.command()
def code(
    query: str = typer.Argument(..., help="Code search query"),
    language: str | None = typer.Option(None, help="Restrict to a language"),
    per_page: int = typer.Option(20, help="Number of results"),
    snippets: bool = typer.Option(True, help="Include matching snippets"),
):
    """Search source code across the organization."""
    from docscope.tools.repo_tools import search_code

    app = _app()
    result = search_code(
        app.github,
        query,
        language=language,
        per_page=per_page,
        include_snippets=snippets,
    )
    _echo(_run(result))


@cli.command()
def index():
    """Build the index and show what was indexed."""
    app = _app()
    _run(app.indexer.ensure_indexed())
    _echo(app.context.stats())


@cli.command()
def mcp(
    transport: str = typer.Option("stdio", help="Transport protocol to use"),
    host: str = typer.Option("0.0.0.0", help="Host to bind the server to"),
    port: int = typer.Option(8000, help="Port to bind the server to"),
):
    """Start the MCP server."""
    valid_transports = ["stdio", "sse", "streamable-http"]
    if transport not in valid_transports:
        typer.echo(
            f"Error: Invalid transport '{transport}'. "
            f"Choose from: {', '.join(valid_transports)}"
        )
        raise typer.Exit(1)

    try:
        from docscope.mcp_server import create_server
    except ImportError as e:
        msg = f"Failed to import MCP components: {e}. Is the 'mcp' extra installed?"
        logger.exception(msg)
        raise typer.Exit(1) from e

    server = create_server(_app())
    try:
        if transport == "stdio":
            server.run(transport=transport)
        else:
            server.run(transport=transport, host=host, port=port)
    except KeyboardInterrupt:
        logger.info("Shutting down...")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
