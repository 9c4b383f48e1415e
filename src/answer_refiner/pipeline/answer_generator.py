"""Generation Client: runs the composed prompt through the text model."""

from __future__ import annotations

import logging
from typing import Protocol

from answer_refiner.clients.llm_client import DEFAULT_MODEL, LLMClient, LLMResponse
from answer_refiner.errors import GenerationFailed

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    """Anything that can turn a prompt into raw text for a given style."""

    async def generate(self, prompt: str, style_key: str) -> LLMResponse: ...


class AnswerGenerator:
    """Claude-backed generator.

    The returned text is passed through as-is; length checks happen later.
    """

    def __init__(
        self,
        llm: LLMClient,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 1024,
    ):
        self.llm = llm
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def generate(self, prompt: str, style_key: str) -> LLMResponse:
        logger.info("Generating refined answer (style=%s, model=%s)", style_key, self.model)
        try:
            return await self.llm.generate(
                prompt=prompt,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as exc:
            logger.exception("Answer generation failed")
            raise GenerationFailed("Failed to refine answer with AI") from exc
