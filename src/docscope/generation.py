"""Answer synthesis from retrieved context."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from docscope.common_types import DEFAULT_ANSWER_MODEL
from docscope.configs.generation_configs import LLMAnswerConfig
from docscope.provider import BaseProvider


SYS_PROMPT = """\
You are a documentation assistant for an organization's services and APIs.
Answer using only the provided context. Name the services, endpoints and
schemas you rely on. If the context does not contain the answer, say so.
"""

ANSWER_PROMPT = """\
Context:

{context}

Question: {question}
"""


class AnswerGenerator(BaseProvider, ABC):
    """Turns a question plus retrieved context into an answer."""

    @abstractmethod
    async def generate(self, question: str, context: str) -> str:
        """Synthesize an answer.

        Args:
            question: Natural language question
            context: Formatted context blocks retrieved for the question

        Returns:
            Answer text
        """


class LLMAnswerGenerator(AnswerGenerator):
    """Answer generator backed by an LLM agent."""

    Config = LLMAnswerConfig

    REQUIRED_PACKAGES: ClassVar = {"llmling-agent"}

    def __init__(
        self,
        model: str | None = None,
        *,
        system_prompt: str | None = None,
    ):
        """Initialize the generator.

        Args:
            model: LLM model to use
            system_prompt: System prompt to use
        """
        self.model = model or DEFAULT_ANSWER_MODEL
        self.system_prompt = system_prompt or SYS_PROMPT

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r})"

    @classmethod
    def from_config(cls, config: LLMAnswerConfig) -> LLMAnswerGenerator:
        return cls(config.model, system_prompt=config.system_prompt)

    def to_config(self) -> LLMAnswerConfig:
        prompt = None if self.system_prompt == SYS_PROMPT else self.system_prompt
        return LLMAnswerConfig(model=self.model, system_prompt=prompt)

    async def generate(self, question: str, context: str) -> str:
        from llmling_agent import Agent

        agent: Agent[None] = Agent(model=self.model, system_prompt=self.system_prompt)
        prompt = ANSWER_PROMPT.format(context=context, question=question)
        response = await agent.run(prompt)
        return str(response.content)
