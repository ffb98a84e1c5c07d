"""Runtime settings, read from the environment and an optional .env file."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_serializer,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from docscope.common_types import (
    DEFAULT_GITHUB_API_URL,
    DEFAULT_OPENAI_BASE_URL,
    DEFAULT_ORG_NAME,
    DEFAULT_SWAGGER_URL,
)
from docscope.configs.embedding_configs import (  # noqa: TC001
    EmbeddingConfig,
    HashEmbeddingConfig,
    OpenAIEmbeddingConfig,
)
from docscope.configs.generation_configs import LLMAnswerConfig


if TYPE_CHECKING:
    from docscope.embeddings.base import EmbeddingModel


def _env(name: str) -> AliasChoices:
    return AliasChoices(f"DOCSCOPE_{name}", name)


class ApiService(BaseModel):
    """A registered API service backed by an OpenAPI specification."""

    name: str
    """Human readable service name."""

    description: str = ""
    """Short description of the service."""

    swagger_url: str
    """Location of the OpenAPI/Swagger document."""

    topics: list[str] = Field(default_factory=list)
    """Topics the service covers, used for resolution and indexing."""

    model_config = ConfigDict(frozen=True, use_attribute_docstrings=True)


DEFAULT_TOPICS = [
    "authentication",
    "organization",
    "program",
    "participant",
    "transaction",
    "webhook",
    "sso",
    "points",
]


class DocscopeSettings(BaseSettings):
    """Settings for the GitHub, OpenAPI and embedding collaborators."""

    github_api_url: str = Field(
        default=DEFAULT_GITHUB_API_URL, validation_alias=_env("GITHUB_API_URL")
    )
    """Base URL of the GitHub REST API."""

    github_token: SecretStr | None = Field(
        default=None, validation_alias=_env("GITHUB_TOKEN")
    )
    """Optional GitHub token (raises rate limits, grants private repo access)."""

    org_name: str = Field(default=DEFAULT_ORG_NAME, validation_alias=_env("ORG_NAME"))
    """GitHub organization whose repositories are indexed."""

    swaggerhub_url: str = Field(
        default=DEFAULT_SWAGGER_URL, validation_alias=_env("SWAGGERHUB_URL")
    )
    """Default OpenAPI document location."""

    swaggerhub_api_key: SecretStr | None = Field(
        default=None, validation_alias=_env("SWAGGERHUB_API_KEY")
    )
    """Bearer key sent to swaggerhub.com hosts."""

    openai_api_key: SecretStr | None = Field(
        default=None, validation_alias=_env("OPENAI_API_KEY")
    )
    """Enables the external embedding provider when set."""

    openai_base_url: str = Field(
        default=DEFAULT_OPENAI_BASE_URL, validation_alias=_env("OPENAI_BASE_URL")
    )
    """Base URL of the OpenAI-compatible embedding API."""

    embedding: EmbeddingConfig | None = None
    """Explicit embedding configuration. Derived from the API key when unset."""

    answer_model: str | None = None
    """Model used to synthesize answers. Raw context is returned when unset."""

    readme_chars: int = Field(default=2000, gt=0)
    """Readme excerpts are truncated to this many characters."""

    max_readmes: int = Field(default=20, ge=0)
    """Maximum number of repository readmes fetched while indexing."""

    services: dict[str, ApiService] = Field(default_factory=dict)
    """API service registry. Defaults to a single service for ``swaggerhub_url``."""

    model_config = SettingsConfigDict(
        frozen=True,
        use_attribute_docstrings=True,
        populate_by_name=True,
        extra="ignore",
        env_prefix="DOCSCOPE_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @field_serializer("*", when_used="json-unless-none")
    def serialize_secrets(self, v, _info):
        if isinstance(v, SecretStr):
            return v.get_secret_value()
        return v

    def api_services(self) -> dict[str, ApiService]:
        """Get the API service registry."""
        if self.services:
            return dict(self.services)
        service = ApiService(
            name="ADR Marketplace Platform API",
            description=(
                "Core marketplace API for organizations, programs, "
                "participants, and transactions"
            ),
            swagger_url=self.swaggerhub_url,
            topics=DEFAULT_TOPICS,
        )
        return {"marketplace-api": service}

    def get_embedding_config(self) -> EmbeddingConfig:
        """Resolve the embedding strategy, chosen once from configuration."""
        if self.embedding is not None:
            return self.embedding
        if self.openai_api_key is not None:
            return OpenAIEmbeddingConfig(
                api_key=self.openai_api_key,
                base_url=self.openai_base_url,
            )
        return HashEmbeddingConfig()

    def create_embedding_model(self) -> EmbeddingModel:
        """Create the embedding model for this configuration."""
        return self.get_embedding_config().get_provider()

    def get_answer_config(self) -> LLMAnswerConfig | None:
        """Answer generator configuration, or None when answers stay raw context."""
        if not self.answer_model:
            return None
        return LLMAnswerConfig(model=self.answer_model)
