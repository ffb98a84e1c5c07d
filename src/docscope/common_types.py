"""Common types and defaults used across docscope."""

from __future__ import annotations

from typing import Literal


HttpMethod = Literal["get", "post", "put", "delete", "patch", "options", "head"]
DocsMode = Literal["code", "info"]
SchemaFormat = Literal["markdown", "typescript", "json"]
DocsTemplate = Literal["default", "detailed", "minimal"]
SearchScope = Literal["all", "services", "docs"]

DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_ORG_NAME = "alldigitalrewards"
DEFAULT_SWAGGER_URL = (
    "https://api.swaggerhub.com/apis/AllDigitalRewards/Marketplace/2.2"
)
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"
DEFAULT_ANSWER_MODEL = "openai:gpt-4o-mini"

DEFAULT_DIMENSIONS = 256
"""Dimensionality of the hash-based fallback embedder."""

OPENAI_DIMENSIONS = 1536
"""Default dimensionality requested from the external embedding API."""

# Operations considered when searching or indexing a spec.
SEARCHABLE_METHODS: tuple[str, ...] = ("get", "post", "put", "delete", "patch")
# Operations listed by endpoint extraction.
ALL_METHODS: tuple[str, ...] = (*SEARCHABLE_METHODS, "options", "head")

# File extensions considered documentation-relevant in a repository tree.
RELEVANT_EXTENSIONS: tuple[str, ...] = (".js", ".ts", ".php", ".py", ".md", ".json")

STOP_WORDS = frozenset({
    "how",
    "does",
    "what",
    "where",
    "when",
    "why",
    "is",
    "are",
    "the",
    "a",
    "an",
    "in",
    "on",
    "at",
    "to",
    "for",
    "of",
    "with",
    "by",
})
