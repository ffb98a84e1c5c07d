"""OpenAPI document querying and rendering."""

from docscope.openapi.extract import (
    extract_api_docs,
    extract_endpoints,
    get_schemas,
    iter_operations,
    parse_openapi,
    search_api_docs,
    spec_overview,
)
from docscope.openapi.render import (
    endpoint_to_markdown,
    generate_markdown_docs,
    render_schemas,
    schema_to_markdown,
    schema_to_typescript,
)

__all__ = [
    "endpoint_to_markdown",
    "extract_api_docs",
    "extract_endpoints",
    "generate_markdown_docs",
    "get_schemas",
    "iter_operations",
    "parse_openapi",
    "render_schemas",
    "schema_to_markdown",
    "schema_to_typescript",
    "search_api_docs",
    "spec_overview",
]
