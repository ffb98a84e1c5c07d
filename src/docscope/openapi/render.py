"""Markdown and TypeScript rendering of OpenAPI documents."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from docscope.common_types import SEARCHABLE_METHODS
from docscope.openapi.extract import (
    as_dict,
    as_list,
    get_schemas,
    iter_operations,
    property_type,
    ref_name,
)


if TYPE_CHECKING:
    from docscope.common_types import DocsTemplate, SchemaFormat


def schema_to_markdown(schema: dict[str, Any], indent: int = 0) -> str:
    """Render a schema description and a property table."""
    spaces = "  " * indent
    md = ""
    if schema.get("description"):
        md += f"{spaces}{schema['description']}\n\n"
    properties = as_dict(schema.get("properties"))
    if properties:
        required = as_list(schema.get("required"))
        md += f"{spaces}| Property | Type | Required | Description |\n"
        md += f"{spaces}|----------|------|----------|-------------|\n"
        for name, prop in properties.items():
            prop = as_dict(prop)
            is_required = "Yes" if name in required else "No"
            desc = prop.get("description") or "-"
            md += f"{spaces}| {name} | {property_type(prop)} | {is_required} | {desc} |\n"
    return md


def endpoint_to_markdown(path: str, method: str, operation: dict[str, Any]) -> str:
    """Render a single operation as a markdown section."""
    md = f"## {method.upper()} {path}\n\n"
    if operation.get("summary"):
        md += f"**{operation['summary']}**\n\n"
    if operation.get("description"):
        md += f"{operation['description']}\n\n"
    tags = as_list(operation.get("tags"))
    if tags:
        md += f"**Tags:** {', '.join(map(str, tags))}\n\n"

    parameters = [as_dict(p) for p in as_list(operation.get("parameters"))]
    if parameters:
        md += "### Parameters\n\n"
        md += "| Name | In | Type | Required | Description |\n"
        md += "|------|-----|------|----------|-------------|\n"
        for param in parameters:
            required = "Yes" if param.get("required") else "No"
            schema_type = as_dict(param.get("schema")).get("type")
            type_ = schema_type or param.get("type") or "string"
            cells = [param.get("name"), param.get("in"), type_, required]
            cells.append(param.get("description") or "-")
            md += "| " + " | ".join(map(str, cells)) + " |\n"
        md += "\n"

    content = as_dict(as_dict(operation.get("requestBody")).get("content"))
    if content:
        md += "### Request Body\n\n"
        media_type = next(iter(content))
        md += f"**Content-Type:** {media_type}\n\n"
        schema = as_dict(as_dict(content[media_type]).get("schema"))
        if schema.get("$ref"):
            md += f"**Schema:** {ref_name(schema['$ref'])}\n\n"
        elif schema:
            md += schema_to_markdown(schema)

    responses = as_dict(operation.get("responses"))
    if responses:
        md += "### Responses\n\n"
        for code, response in responses.items():
            md += f"#### {code}\n\n"
            md += f"{as_dict(response).get('description') or 'No description'}\n\n"
    return md


def _typescript_type(prop: dict[str, Any]) -> str:
    match prop.get("type"):
        case "string":
            return "string"
        case "integer" | "number":
            return "number"
        case "boolean":
            return "boolean"
        case "array":
            items = as_dict(prop.get("items"))
            if items.get("$ref"):
                return f"{ref_name(items['$ref'])}[]"
            return f"{items.get('type') or 'unknown'}[]"
        case _ if prop.get("$ref"):
            return ref_name(prop["$ref"])
        case "object":
            return "Record<string, unknown>"
        case _:
            return "unknown"


def schema_to_typescript(schema: dict[str, Any], name: str) -> str:
    """Render a schema as a TypeScript interface."""
    required = as_list(schema.get("required"))
    ts = f"interface {name} {{\n"
    for prop_name, prop in as_dict(schema.get("properties")).items():
        prop = as_dict(prop)
        optional = "" if prop_name in required else "?"
        if prop.get("description"):
            ts += f"  /** {prop['description']} */\n"
        ts += f"  {prop_name}{optional}: {_typescript_type(prop)};\n"
    return ts + "}\n"


def render_schema(schema: dict[str, Any], name: str, fmt: SchemaFormat) -> str:
    match fmt:
        case "typescript":
            return schema_to_typescript(schema, name)
        case "json":
            return json.dumps({name: schema}, indent=2)
        case "markdown":
            return f"# {name}\n\n{schema_to_markdown(schema)}"


def render_schemas(
    spec: dict[str, Any],
    schema_name: str | None = None,
    fmt: SchemaFormat = "markdown",
) -> str:
    """Render one named schema, or all of them, in the requested format.

    Raises:
        ValueError: If ``schema_name`` is not defined in the document
    """
    schemas = get_schemas(spec)
    if schema_name:
        if schema_name not in schemas:
            msg = f"Schema {schema_name!r} not found"
            raise ValueError(msg)
        schema = as_dict(schemas[schema_name])
        if fmt == "json":
            return json.dumps(schema, indent=2)
        return render_schema(schema, schema_name, fmt)

    separator = {"typescript": "\n", "json": "\n\n", "markdown": "\n---\n\n"}[fmt]
    return "".join(
        render_schema(as_dict(schema), name, fmt) + separator
        for name, schema in schemas.items()
    )


def generate_markdown_docs(
    spec: dict[str, Any],
    template: DocsTemplate = "default",
) -> str:
    """Render a full markdown reference of an API.

    The ``minimal`` template leaves out the schema section.
    """
    info = as_dict(spec.get("info"))
    md = f"# {info.get('title', 'API')}\n\n"
    md += f"**Version:** {info.get('version', 'unknown')}\n\n"
    if info.get("description"):
        md += f"## Overview\n\n{info['description']}\n\n"

    servers = [as_dict(s) for s in as_list(spec.get("servers"))]
    if servers:
        md += "## Servers\n\n"
        for server in servers:
            suffix = f" - {server['description']}" if server.get("description") else ""
            md += f"- **{server.get('url')}**{suffix}\n"
        md += "\n"

    security = as_dict(as_dict(spec.get("components")).get("securitySchemes"))
    if security:
        md += "## Authentication\n\n"
        for name, scheme in security.items():
            scheme = as_dict(scheme)
            md += f"### {name}\n\n"
            md += f"- **Type:** {scheme.get('type')}\n"
            if scheme.get("scheme"):
                md += f"- **Scheme:** {scheme['scheme']}\n"
            if scheme.get("description"):
                md += f"- **Description:** {scheme['description']}\n"
            md += "\n"

    md += "## Endpoints\n\n"
    for path, method, operation in iter_operations(spec, SEARCHABLE_METHODS):
        md += endpoint_to_markdown(path, method, operation)
        md += "---\n\n"

    schemas = get_schemas(spec)
    if template != "minimal" and schemas:
        md += "## Schemas\n\n"
        for name, schema in schemas.items():
            md += f"### {name}\n\n"
            md += schema_to_markdown(as_dict(schema))
            md += "\n"
    return md
