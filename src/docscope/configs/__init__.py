"""Configuration models."""

from docscope.configs.embedding_configs import (
    EmbeddingConfig,
    HashEmbeddingConfig,
    OpenAIEmbeddingConfig,
)
from docscope.configs.generation_configs import LLMAnswerConfig
from docscope.configs.settings import ApiService, DocscopeSettings

__all__ = [
    "ApiService",
    "DocscopeSettings",
    "EmbeddingConfig",
    "HashEmbeddingConfig",
    "LLMAnswerConfig",
    "OpenAIEmbeddingConfig",
]
