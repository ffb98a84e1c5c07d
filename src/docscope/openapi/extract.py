"""Querying endpoints and schemas of an OpenAPI document.

All helpers accept partially malformed documents: missing or non-mapping
sections are treated as empty rather than raising.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from docscope.common_types import ALL_METHODS, SEARCHABLE_METHODS


if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from docscope.common_types import DocsMode


def as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def as_text(value: Any) -> str:
    return "" if value is None else str(value)


def ref_name(ref: Any) -> str:
    """Last segment of a ``$ref`` pointer."""
    return str(ref).rsplit("/", 1)[-1]


def property_type(prop: dict[str, Any]) -> str:
    """Type label of a schema property (its ``$ref`` target when referenced)."""
    if prop.get("type"):
        return str(prop["type"])
    if prop.get("$ref"):
        return ref_name(prop["$ref"])
    return "object"


def get_schemas(spec: dict[str, Any]) -> dict[str, Any]:
    """Component schemas (OpenAPI 3) or definitions (Swagger 2)."""
    schemas = as_dict(as_dict(spec.get("components")).get("schemas"))
    return schemas or as_dict(spec.get("definitions"))


def iter_operations(
    spec: dict[str, Any],
    methods: Iterable[str] = SEARCHABLE_METHODS,
) -> Iterator[tuple[str, str, dict[str, Any]]]:
    """Yield ``(path, method, operation)`` for the given lower-case methods."""
    allowed = set(methods)
    for path, path_item in as_dict(spec.get("paths")).items():
        for method, operation in as_dict(path_item).items():
            if method in allowed and isinstance(operation, dict):
                yield path, method, operation


def query_terms(query: str) -> list[str]:
    """Lower-cased whitespace-separated terms longer than two characters."""
    return [t for t in query.lower().split() if len(t) > 2]  # noqa: PLR2004


def spec_overview(spec: dict[str, Any]) -> dict[str, Any]:
    info = as_dict(spec.get("info"))
    return {
        "title": info.get("title"),
        "version": info.get("version"),
        "description": info.get("description"),
        "servers": as_list(spec.get("servers")),
        "tags": [as_dict(t).get("name") for t in as_list(spec.get("tags"))],
        "path_count": len(as_dict(spec.get("paths"))),
        "schema_count": len(get_schemas(spec)),
    }


def parse_openapi(spec: dict[str, Any], include_schemas: bool = True) -> dict[str, Any]:
    """Structural summary: info, servers, paths, tags and schema names."""
    result: dict[str, Any] = {
        "info": as_dict(spec.get("info")),
        "servers": as_list(spec.get("servers")),
        "paths": list(as_dict(spec.get("paths"))),
        "tags": as_list(spec.get("tags")),
    }
    if include_schemas:
        result["schemas"] = list(get_schemas(spec))
    return result


def extract_endpoints(
    spec: dict[str, Any],
    *,
    tag: str | None = None,
    method: str | None = None,
) -> list[dict[str, Any]]:
    """List operations, optionally filtered by tag and HTTP method."""
    endpoints = []
    for path, verb, operation in iter_operations(spec, ALL_METHODS):
        tags = as_list(operation.get("tags"))
        if method and verb != method.lower():
            continue
        if tag and tag not in tags:
            continue
        endpoints.append({
            "method": verb.upper(),
            "path": path,
            "operation_id": operation.get("operationId"),
            "summary": operation.get("summary"),
            "tags": tags,
            "parameters": len(as_list(operation.get("parameters"))),
        })
    return endpoints


def _relevance(text: str, terms: list[str]) -> float:
    matches = [t for t in terms if t in text]
    return len(matches) / len(terms) if terms else 0.0


def search_api_docs(spec: dict[str, Any], query: str) -> dict[str, list[dict[str, Any]]]:
    """Keyword search over endpoints and schemas.

    Relevance is the fraction of query terms found in an item's text. Items
    without any match are left out; results are sorted by relevance, ties in
    document order.
    """
    terms = query_terms(query)
    endpoints = []
    for path, method, operation in iter_operations(spec):
        text = " ".join([
            str(path),
            as_text(operation.get("summary")),
            as_text(operation.get("description")),
            as_text(operation.get("operationId")),
            *map(str, as_list(operation.get("tags"))),
        ]).lower()
        relevance = _relevance(text, terms)
        if relevance > 0:
            endpoints.append({
                "method": method.upper(),
                "path": path,
                "summary": operation.get("summary"),
                "description": operation.get("description"),
                "tags": as_list(operation.get("tags")),
                "operation_id": operation.get("operationId"),
                "relevance": relevance,
            })

    schemas = []
    for name, schema in get_schemas(spec).items():
        schema = as_dict(schema)
        properties = list(as_dict(schema.get("properties")))
        description = as_text(schema.get("description"))
        text = " ".join([str(name), description, *map(str, properties)]).lower()
        relevance = _relevance(text, terms)
        if relevance > 0:
            schemas.append({
                "name": name,
                "description": schema.get("description"),
                "properties": properties,
                "relevance": relevance,
            })

    endpoints.sort(key=lambda e: e["relevance"], reverse=True)
    schemas.sort(key=lambda s: s["relevance"], reverse=True)
    return {"endpoints": endpoints, "schemas": schemas}


def _endpoint_details(operation: dict[str, Any]) -> dict[str, Any]:
    details: dict[str, Any] = {}
    if "parameters" in operation:
        details["parameters"] = [
            {
                "name": p.get("name"),
                "in": p.get("in"),
                "required": p.get("required", False),
                "type": as_dict(p.get("schema")).get("type") or p.get("type"),
                "description": p.get("description"),
            }
            for p in map(as_dict, as_list(operation.get("parameters")))
        ]
    content = as_dict(as_dict(operation.get("requestBody")).get("content"))
    if content:
        media_type = next(iter(content))
        schema = as_dict(content[media_type]).get("schema")
        if isinstance(schema, dict) and schema.get("$ref"):
            schema = ref_name(schema["$ref"])
        details["request_body"] = {"content_type": media_type, "schema": schema}
    responses = as_dict(operation.get("responses"))
    if responses:
        details["responses"] = [
            {"code": code, "description": as_dict(resp).get("description")}
            for code, resp in responses.items()
        ]
    return details


def extract_api_docs(
    spec: dict[str, Any],
    topic: str | None = None,
    mode: DocsMode = "code",
) -> dict[str, Any]:
    """Documentation for a topic, or an overview when no topic is given.

    An item matches when the lower-cased topic is a substring of its text.
    ``code`` mode adds parameters, request bodies, responses and property
    details; ``info`` mode keeps summaries and descriptions only.
    """
    if not topic:
        return spec_overview(spec)

    needle = topic.lower()
    endpoints = []
    for path, method, operation in iter_operations(spec):
        tags = as_list(operation.get("tags"))
        text = " ".join([
            str(path),
            as_text(operation.get("summary")),
            as_text(operation.get("description")),
            *map(str, tags),
        ]).lower()
        if needle not in text:
            continue
        endpoint = {
            "method": method.upper(),
            "path": path,
            "summary": operation.get("summary"),
            "description": operation.get("description"),
            "tags": tags,
        }
        if mode == "code":
            endpoint |= _endpoint_details(operation)
        endpoints.append(endpoint)

    schemas = []
    for name, schema in get_schemas(spec).items():
        schema = as_dict(schema)
        properties = as_dict(schema.get("properties"))
        description = as_text(schema.get("description"))
        text = " ".join([str(name), description, *map(str, properties)]).lower()
        if needle not in text:
            continue
        info: dict[str, Any] = {"name": name, "description": schema.get("description")}
        if mode == "code":
            required = as_list(schema.get("required"))
            info["properties"] = [
                {
                    "name": prop_name,
                    "type": property_type(as_dict(prop)),
                    "description": as_dict(prop).get("description"),
                    "required": prop_name in required,
                }
                for prop_name, prop in properties.items()
            ]
        schemas.append(info)

    return {"endpoints": endpoints, "schemas": schemas}
