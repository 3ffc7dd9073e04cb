"""
PydanticAI Agent definition for refund explanations.

Loads the explainer configuration from YAML and builds a text-only agent
backed by an OpenAI chat model.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from pydantic_ai import Agent
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider

from refund_service.ai.prompts import DEFAULT_SYSTEM_PROMPT
from refund_service.config import Settings

logger = logging.getLogger(__name__)

AGENTS_DIR = Path(__file__).parent.parent / "agents"
EXPLAINER_CONFIG_PATH = AGENTS_DIR / "refund_explainer.yaml"


@dataclass
class AgentConfig:
    """Configuration for an AI agent."""

    name: str
    description: str
    system_prompt: str
    model: Optional[str] = None  # Override default model
    max_tokens: Optional[int] = None  # Override default token budget


def load_agent_config(path: Path = EXPLAINER_CONFIG_PATH) -> AgentConfig:
    """Load agent configuration from a YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    config = AgentConfig(
        name=data["name"],
        description=data.get("description", ""),
        system_prompt=data.get("system_prompt") or DEFAULT_SYSTEM_PROMPT,
        model=data.get("model"),
        max_tokens=data.get("max_tokens"),
    )
    logger.debug("Loaded agent config: %s", config.name)
    return config


def resolve_max_tokens(config: AgentConfig, settings: Settings) -> int:
    return config.max_tokens or settings.llm_max_tokens


def create_explainer_agent(config: AgentConfig, settings: Settings) -> Agent[None, str]:
    """
    Create the text-only explainer agent.

    Raises:
        ValueError: If no OpenAI API key is configured
    """
    if not settings.ai_enabled:
        raise ValueError("OPENAI_API_KEY is required to create the explainer agent")

    model_name = config.model or settings.llm_model
    logger.info("Creating explainer agent with model: %s", model_name)

    model = OpenAIChatModel(
        model_name,
        provider=OpenAIProvider(api_key=settings.openai_api_key),
    )
    return Agent(model=model, system_prompt=config.system_prompt)
