"""
Explanation mode selection.

Picks the demo or AI generator from configuration. The orchestrator calls
`select()` once per request; generators never look at the environment.
"""
import logging
from typing import Callable, Optional

from pydantic_ai import Agent

from refund_service.ai.agent import (
    AgentConfig,
    create_explainer_agent,
    load_agent_config,
    resolve_max_tokens,
)
from refund_service.config import Settings

from .ai import AIExplanationGenerator
from .demo import DemoExplanationGenerator
from .types import ExplanationGenerator

logger = logging.getLogger(__name__)

AgentFactory = Callable[[AgentConfig, Settings], Agent]


class ExplanationModeSelector:
    """
    Chooses AI mode when an OpenAI key is configured, demo mode otherwise.

    The agent is built on first use and then reused; it holds no
    per-request state.
    """

    def __init__(
        self,
        settings: Settings,
        agent_config: Optional[AgentConfig] = None,
        agent_factory: AgentFactory = create_explainer_agent,
    ):
        self._settings = settings
        self._agent_config = agent_config
        self._agent_factory = agent_factory
        self._agent: Optional[Agent] = None

    def _get_agent(self) -> tuple[Agent, AgentConfig]:
        if self._agent_config is None:
            self._agent_config = load_agent_config()
        if self._agent is None:
            self._agent = self._agent_factory(self._agent_config, self._settings)
        return self._agent, self._agent_config

    def select(self) -> ExplanationGenerator:
        if self._settings.ai_enabled:
            agent, config = self._get_agent()
            return AIExplanationGenerator(
                agent,
                max_tokens=resolve_max_tokens(config, self._settings),
            )

        logger.warning("OPENAI_API_KEY not set, using demo mode")
        return DemoExplanationGenerator(chunk_delay=self._settings.demo_chunk_delay_seconds)
