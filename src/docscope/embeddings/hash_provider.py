"""Deterministic bag-of-hashed-words embeddings."""

from __future__ import annotations

import re

import numpy as np

from docscope.common_types import DEFAULT_DIMENSIONS
from docscope.configs.embedding_configs import HashEmbeddingConfig
from docscope.embeddings.base import EmbeddingModel


TOKEN_SPLIT = re.compile(r"\W+")
MIN_TOKEN_LENGTH = 3


def tokenize(text: str) -> list[str]:
    """Lower-case and split text on non-word runs, dropping tokens of <= 2 chars."""
    return [t for t in TOKEN_SPLIT.split(text.lower()) if len(t) >= MIN_TOKEN_LENGTH]


def token_bucket(token: str, dimensions: int) -> int:
    """Rolling hash of a token, reduced modulo ``dimensions``."""
    value = 0
    for char in token:
        value = (value * 31 + ord(char)) % dimensions
    return value


def hash_embed(text: str | None, dimensions: int = DEFAULT_DIMENSIONS) -> np.ndarray:
    """Embed text as an L2-normalized histogram of hashed tokens.

    Token order does not matter and colliding tokens share a bucket. Text
    without usable tokens yields the all-zero vector.

    Args:
        text: Text to embed. ``None`` and non-strings are coerced to text.
        dimensions: Length of the resulting vector

    Returns:
        Vector of length ``dimensions``
    """
    if not isinstance(text, str):
        text = "" if text is None else str(text)
    vector = np.zeros(dimensions, dtype=np.float64)
    for token in tokenize(text):
        vector[token_bucket(token, dimensions)] += 1.0
    norm = float(np.linalg.norm(vector)) or 1.0
    return vector / norm


class HashEmbeddings(EmbeddingModel):
    """Local embedder which needs neither network access nor model weights.

    This is a coarse lexical model: texts sharing many tokens end up close,
    synonyms and paraphrases do not.
    """

    Config = HashEmbeddingConfig

    def __init__(self, dimensions: int = DEFAULT_DIMENSIONS):
        if dimensions <= 0:
            msg = f"dimensions must be positive, got {dimensions}"
            raise ValueError(msg)
        self.dimensions = dimensions

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dimensions={self.dimensions})"

    @classmethod
    def from_config(cls, config: HashEmbeddingConfig) -> HashEmbeddings:
        return cls(dimensions=config.dimensions)

    def to_config(self) -> HashEmbeddingConfig:
        return HashEmbeddingConfig(dimensions=self.dimensions)

    def embed(self, text: str | None) -> np.ndarray:
        """Embed text synchronously."""
        return hash_embed(text, self.dimensions)

    async def embed_query(self, query: str) -> np.ndarray:
        return self.embed(query)
