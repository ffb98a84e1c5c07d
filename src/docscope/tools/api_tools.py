"""Tools working on a single OpenAPI document."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from docscope import openapi
from docscope.openapi.extract import as_dict


if TYPE_CHECKING:
    from docscope.clients.openapi import SpecLoader
    from docscope.common_types import DocsTemplate, HttpMethod, SchemaFormat


async def parse_openapi(
    loader: SpecLoader,
    url: str,
    include_schemas: bool = True,
) -> dict[str, Any]:
    """Info, servers, paths, tags and (optionally) schema names of a spec."""
    spec = await loader.load(url)
    return openapi.parse_openapi(spec, include_schemas=include_schemas)


async def extract_endpoints(
    loader: SpecLoader,
    url: str,
    *,
    tag: str | None = None,
    method: HttpMethod | None = None,
) -> dict[str, Any]:
    spec = await loader.load(url)
    endpoints = openapi.extract_endpoints(spec, tag=tag, method=method)
    return {"count": len(endpoints), "endpoints": endpoints}


async def extract_schemas(
    loader: SpecLoader,
    url: str,
    *,
    schema_name: str | None = None,
    fmt: SchemaFormat = "markdown",
) -> str:
    """Render one or all schemas of a spec.

    Raises:
        ValueError: If ``schema_name`` is not defined in the document
    """
    spec = await loader.load(url)
    return openapi.render_schemas(spec, schema_name, fmt)


async def generate_markdown_docs(
    loader: SpecLoader,
    url: str,
    template: DocsTemplate = "default",
) -> str:
    spec = await loader.load(url)
    return openapi.generate_markdown_docs(spec, template)


async def search_api_docs(loader: SpecLoader, url: str, query: str) -> dict[str, Any]:
    """Keyword search over the endpoints and schemas of a spec."""
    spec = await loader.load(url)
    results = openapi.search_api_docs(spec, query)
    info = as_dict(spec.get("info"))
    return {
        "api": info.get("title") or "Unknown API",
        "version": info.get("version"),
        "query": query,
        **results,
    }
