"""Configuration models for embedding providers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from docscope.common_types import (
    DEFAULT_DIMENSIONS,
    DEFAULT_EMBEDDING_MODEL,
    DEFAULT_OPENAI_BASE_URL,
    OPENAI_DIMENSIONS,
)


if TYPE_CHECKING:
    from docscope.embeddings.base import EmbeddingModel


class BaseEmbeddingConfig(BaseModel):
    """Base configuration for embedding providers."""

    type: str = Field(init=False)
    """Type identifier for the embedding provider."""

    model_config = ConfigDict(frozen=True, use_attribute_docstrings=True)

    def get_provider(self) -> EmbeddingModel:
        """Get the embedding provider instance."""
        raise NotImplementedError


class HashEmbeddingConfig(BaseEmbeddingConfig):
    """Configuration for the local hashing embedder."""

    type: Literal["hash"] = Field(default="hash", init=False)
    """Type discriminator for the hashing embedder."""

    dimensions: int = Field(default=DEFAULT_DIMENSIONS, gt=0)
    """Length of the produced vectors."""

    def get_provider(self) -> EmbeddingModel:
        """Get the embedding provider instance."""
        from docscope.embeddings.hash_provider import HashEmbeddings

        return HashEmbeddings(dimensions=self.dimensions)


class OpenAIEmbeddingConfig(BaseEmbeddingConfig):
    """Configuration for OpenAI-compatible embedding APIs."""

    type: Literal["openai"] = Field(default="openai", init=False)
    """Type discriminator for OpenAI embedding provider."""

    api_key: SecretStr
    """API key sent as bearer token."""

    model: str = DEFAULT_EMBEDDING_MODEL
    """Model identifier for embeddings."""

    base_url: str = DEFAULT_OPENAI_BASE_URL
    """Base URL of the API (the ``/embeddings`` route is appended)."""

    dimensions: int = Field(default=OPENAI_DIMENSIONS, gt=0)
    """Requested vector length. The fallback embedder uses the same length."""

    max_input_chars: int = Field(default=8000, gt=0)
    """Texts are truncated to this many characters before submission."""

    def get_provider(self) -> EmbeddingModel:
        """Get the embedding provider instance."""
        from docscope.embeddings.openai_provider import OpenAIEmbeddings

        return OpenAIEmbeddings(
            api_key=self.api_key.get_secret_value(),
            model=self.model,
            base_url=self.base_url,
            dimensions=self.dimensions,
            max_input_chars=self.max_input_chars,
        )


EmbeddingConfig = Annotated[
    HashEmbeddingConfig | OpenAIEmbeddingConfig,
    Field(discriminator="type"),
]
