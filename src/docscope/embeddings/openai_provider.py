"""Embeddings from an OpenAI-compatible HTTP API."""

from __future__ import annotations

from typing import Any

import numpy as np

from docscope.common_types import (
    DEFAULT_EMBEDDING_MODEL,
    DEFAULT_OPENAI_BASE_URL,
    OPENAI_DIMENSIONS,
)
from docscope.configs.embedding_configs import OpenAIEmbeddingConfig
from docscope.embeddings.base import EmbeddingModel
from docscope.embeddings.hash_provider import HashEmbeddings
from docscope.log import get_logger


logger = get_logger(__name__)


class OpenAIEmbeddings(EmbeddingModel):
    """Remote embedder with a per-call local fallback.

    Whenever a request fails, the vector for that text comes from
    ``HashEmbeddings`` with the same dimensionality, so a store never mixes
    vector lengths. The next call tries the API again.
    """

    Config = OpenAIEmbeddingConfig

    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_EMBEDDING_MODEL,
        base_url: str = DEFAULT_OPENAI_BASE_URL,
        dimensions: int = OPENAI_DIMENSIONS,
        max_input_chars: int = 8000,
    ):
        """Initialize the embedder.

        Args:
            api_key: API key sent as bearer token
            model: Embedding model name
            base_url: API base URL
            dimensions: Requested vector length
            max_input_chars: Texts are truncated to this length before submission
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.dimensions = dimensions
        self.max_input_chars = max_input_chars
        self.fallback = HashEmbeddings(dimensions=dimensions)

    def __repr__(self) -> str:
        name = type(self).__name__
        return f"{name}(model={self.model!r}, dimensions={self.dimensions})"

    @classmethod
    def from_config(cls, config: OpenAIEmbeddingConfig) -> OpenAIEmbeddings:
        return cls(
            api_key=config.api_key.get_secret_value(),
            model=config.model,
            base_url=config.base_url,
            dimensions=config.dimensions,
            max_input_chars=config.max_input_chars,
        )

    def to_config(self) -> OpenAIEmbeddingConfig:
        from pydantic import SecretStr

        return OpenAIEmbeddingConfig(
            api_key=SecretStr(self.api_key),
            model=self.model,
            base_url=self.base_url,
            dimensions=self.dimensions,
            max_input_chars=self.max_input_chars,
        )

    async def _request_embedding(self, text: str) -> np.ndarray:
        import anyenv

        payload: dict[str, Any] = {
            "model": self.model,
            "input": text[: self.max_input_chars],
            "dimensions": self.dimensions,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}
        url = f"{self.base_url}/embeddings"
        response = await anyenv.post(url, json=payload, headers=headers)
        data = await response.json()
        if "error" in data:
            msg = f"Embedding API error: {data['error']}"
            raise ValueError(msg)
        vector = np.asarray(data["data"][0]["embedding"], dtype=np.float64)
        if vector.shape != (self.dimensions,):
            msg = f"Expected {self.dimensions} dimensions, got {vector.shape}"
            raise ValueError(msg)
        return vector

    async def embed_query(self, query: str) -> np.ndarray:
        """Embed text through the API, falling back to local hashing on failure."""
        if not query or not query.strip():
            return self.fallback.embed(query)
        try:
            return await self._request_embedding(query)
        except Exception as e:  # noqa: BLE001
            logger.warning("Embedding request failed, using hash fallback: %s", e)
            return self.fallback.embed(query)
