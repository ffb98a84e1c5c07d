"""Data models for indexed documents and retrieval results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class BaseDocument(BaseModel):
    """Base class for documents held by a vector store."""

    type: str = Field(init=False)
    """Type discriminator."""

    model_config = ConfigDict(frozen=True, use_attribute_docstrings=True)

    @property
    def title(self) -> str:
        """Short label used in source listings."""
        raise NotImplementedError

    def embedding_text(self) -> str:
        """Text representation which gets embedded."""
        raise NotImplementedError


class ApiSummaryDocument(BaseDocument):
    """A registered API service."""

    type: Literal["api"] = Field(default="api", init=False)

    service_id: str
    """Registry id of the service."""

    name: str
    """Service name."""

    description: str = ""
    """Service description."""

    topics: list[str] = Field(default_factory=list)
    """Topics covered by the service."""

    swagger_url: str | None = None
    """Location of the OpenAPI document."""

    @property
    def title(self) -> str:
        return self.name

    def embedding_text(self) -> str:
        return " ".join([self.name, self.description, *self.topics])


class RepositoryDocument(BaseDocument):
    """A source repository of the organization."""

    type: Literal["repository"] = Field(default="repository", init=False)

    name: str
    """Repository name, also used as service id."""

    description: str = ""
    """Repository description."""

    language: str | None = None
    """Primary language."""

    topics: list[str] = Field(default_factory=list)
    """Repository topics."""

    url: str | None = None
    """Web URL of the repository."""

    @property
    def title(self) -> str:
        return self.name

    def embedding_text(self) -> str:
        return " ".join([self.name, self.description, self.language or "", *self.topics])


class EndpointDocument(BaseDocument):
    """A single API operation."""

    type: Literal["endpoint"] = Field(default="endpoint", init=False)

    service_id: str
    """Registry id of the owning service."""

    method: str
    """Upper-case HTTP method."""

    path: str
    """Path template of the operation."""

    summary: str = ""
    """Operation summary."""

    description: str = ""
    """Operation description."""

    tags: list[str] = Field(default_factory=list)
    """Operation tags."""

    operation_id: str | None = None
    """Operation id, if declared."""

    @property
    def title(self) -> str:
        return f"{self.method} {self.path}"

    def embedding_text(self) -> str:
        parts = [self.method, self.path, self.summary, self.description, *self.tags]
        if self.operation_id:
            parts.append(self.operation_id)
        return " ".join(parts)


class SchemaDocument(BaseDocument):
    """A component schema of an API."""

    type: Literal["schema"] = Field(default="schema", init=False)

    service_id: str
    """Registry id of the owning service."""

    name: str
    """Schema name."""

    description: str = ""
    """Schema description."""

    properties: list[str] = Field(default_factory=list)
    """Property names."""

    required: list[str] = Field(default_factory=list)
    """Names of required properties."""

    @property
    def title(self) -> str:
        return self.name

    def embedding_text(self) -> str:
        return " ".join([self.name, self.description, *self.properties])


class ReadmeDocument(BaseDocument):
    """Readme excerpt of a repository."""

    type: Literal["readme"] = Field(default="readme", init=False)

    repo: str
    """Repository the readme belongs to."""

    content: str
    """Truncated readme text."""

    @property
    def title(self) -> str:
        return f"{self.repo} README"

    def embedding_text(self) -> str:
        return f"{self.repo} {self.content}"


IndexedDocument = Annotated[
    ApiSummaryDocument
    | RepositoryDocument
    | EndpointDocument
    | SchemaDocument
    | ReadmeDocument,
    Field(discriminator="type"),
]


@dataclass(frozen=True)
class SearchResult:
    """A document paired with its similarity to the query."""

    document: IndexedDocument
    score: float  # cosine similarity, -1 to 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.document.type,
            "score": round(self.score, 4),
            "document": self.document.model_dump(exclude={"type"}),
        }


@dataclass(frozen=True)
class IndexFailure:
    """A source record that could not be indexed."""

    source: str
    message: str


class Answer(BaseModel):
    """Answer to a natural language question."""

    answer: str
    """Synthesized answer, or the raw context when synthesis is unavailable."""

    context: str
    """Context the answer is based on."""

    sources: list[dict[str, Any]] = Field(default_factory=list)
    """Documents the context was assembled from."""

    error: str | None = None
    """Note describing a partial failure, if any."""

    model_config = ConfigDict(use_attribute_docstrings=True)
