"""
Model catalog - the models this service registers, their providers and
hand-tuned weights.

Catalog order is registration order, and registration order is the
objective selector's tie-break order.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from httpx import Timeout
from langchain_anthropic import ChatAnthropic
from langchain_openai import ChatOpenAI

from llm_router.config.settings import Config
from llm_router.domain.value_objects import ModelId, ModelWeights
from llm_router.services.llm_backend import ChatBackend, LangChainBackend
from llm_router.services.model_registry import ModelRegistry

logger = logging.getLogger(__name__)


class Provider(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


@dataclass(frozen=True)
class CatalogEntry:
    model_id: ModelId
    provider: Provider
    description: str
    weights: ModelWeights
    model_name_setting: str  # Config attribute holding the provider model name


MODEL_CATALOG: tuple[CatalogEntry, ...] = (
    CatalogEntry(
        model_id=ModelId.GPT35,
        provider=Provider.OPENAI,
        description="GPT-3.5 Turbo",
        weights=ModelWeights(complexity=0.3, speed=0.8, cost=0.9),
        model_name_setting="GPT35_MODEL_NAME",
    ),
    CatalogEntry(
        model_id=ModelId.GPT4,
        provider=Provider.OPENAI,
        description="GPT-4",
        weights=ModelWeights(complexity=0.9, speed=0.3, cost=0.2),
        model_name_setting="GPT4_MODEL_NAME",
    ),
    CatalogEntry(
        model_id=ModelId.CLAUDE3_SONNET,
        provider=Provider.ANTHROPIC,
        description="Claude-3 Sonnet",
        weights=ModelWeights(complexity=0.8, speed=0.5, cost=0.5),
        model_name_setting="CLAUDE3_SONNET_MODEL_NAME",
    ),
    CatalogEntry(
        model_id=ModelId.CLAUDE3_HAIKU,
        provider=Provider.ANTHROPIC,
        description="Claude-3 Haiku",
        weights=ModelWeights(complexity=0.4, speed=0.9, cost=0.8),
        model_name_setting="CLAUDE3_HAIKU_MODEL_NAME",
    ),
)


def build_backend(entry: CatalogEntry, config=Config) -> LangChainBackend:
    """Create the LangChain chat model for a catalog entry."""
    model_name = getattr(config, entry.model_name_setting)

    if entry.provider is Provider.OPENAI:
        chat_model = ChatOpenAI(
            model=model_name,
            temperature=config.LLM_TEMPERATURE,
            api_key=config.OPENAI_KEY,
            timeout=Timeout(config.LLM_TIMEOUT, connect=config.LLM_CONNECT_TIMEOUT),
        )
    elif entry.provider is Provider.ANTHROPIC:
        chat_model = ChatAnthropic(
            model=model_name,
            temperature=config.LLM_TEMPERATURE,
            api_key=config.ANTHROPIC_KEY,
            timeout=config.LLM_TIMEOUT,
        )
    else:
        raise ValueError(f"Unsupported provider: {entry.provider}")

    return LangChainBackend(chat_model, name=model_name)


def build_registry(
    backends: Optional[dict[ModelId, ChatBackend]] = None, config=Config
) -> ModelRegistry:
    """
    Register every catalog model and freeze the registry.

    Args:
        backends: Pre-built backends by ModelId; missing ones are built from config
        config: Settings class supplying model names and credentials

    Returns:
        Frozen ModelRegistry in catalog order
    """
    backends = backends or {}
    registry = ModelRegistry()
    for entry in MODEL_CATALOG:
        backend = backends.get(entry.model_id) or build_backend(entry, config)
        registry.register(
            entry.model_id,
            backend,
            entry.weights,
            description=entry.description,
        )
    registry.freeze()
    logger.info(
        "Model registry ready: %s",
        ", ".join(model_id.value for model_id, _ in registry.list_all()),
    )
    return registry
