"""Configuration models for answer generators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field

from docscope.common_types import DEFAULT_ANSWER_MODEL


if TYPE_CHECKING:
    from docscope.generation import LLMAnswerGenerator


class LLMAnswerConfig(BaseModel):
    """Configuration for LLM backed answer synthesis."""

    type: Literal["llm"] = Field(default="llm", init=False)
    """Type discriminator for the LLM answer generator."""

    model: str = DEFAULT_ANSWER_MODEL
    """LLM model identifier, e.g. ``openai:gpt-4o-mini``."""

    system_prompt: str | None = None
    """System prompt override. The built-in documentation prompt when unset."""

    model_config = ConfigDict(frozen=True, use_attribute_docstrings=True)

    def get_provider(self) -> LLMAnswerGenerator:
        """Get the answer generator instance."""
        from docscope.generation import LLMAnswerGenerator

        return LLMAnswerGenerator.from_config(self)
