"""
AI Explanation Generator.

Streams an explanation from a chat model through a PydanticAI agent.
Single Responsibility: only talks to the model, knows nothing about SSE.
"""
import logging
from typing import AsyncIterator, Optional

from pydantic_ai import Agent
from pydantic_ai.settings import ModelSettings

from refund_service.ai.prompts import build_user_prompt
from refund_service.models.filing import FilingStatusSnapshot

logger = logging.getLogger(__name__)

AI_UNAVAILABLE_MESSAGE = "Error connecting to AI service. Please try again."


class AIExplanationGenerator:
    """
    Forwards text deltas of a streaming chat completion.

    The remote stream is held by `run_stream()`'s context manager, so it is
    closed whether the stream ends, fails, or the consumer stops early.
    """

    def __init__(self, agent: Agent, max_tokens: int = 200):
        self._agent = agent
        self._max_tokens = max_tokens

    async def generate(
        self,
        question: str,
        snapshot: Optional[FilingStatusSnapshot],
    ) -> AsyncIterator[str]:
        """
        Yield non-empty text deltas from the model.

        If the stream cannot be opened, yields a single unavailable message.
        If it fails after opening, stops; chunks already yielded stand.
        """
        prompt = build_user_prompt(question, snapshot)
        opened = False

        try:
            async with self._agent.run_stream(
                prompt,
                model_settings=ModelSettings(max_tokens=self._max_tokens),
            ) as result:
                opened = True
                async for delta in result.stream_text(delta=True, debounce_by=None):
                    if delta:
                        yield delta

        except Exception as e:
            if opened:
                logger.error("Error receiving from AI stream: %s", e)
                return
            logger.error("Failed to create AI stream: %s", e)
            yield AI_UNAVAILABLE_MESSAGE
