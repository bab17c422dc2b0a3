"""
Tests for the model catalog and the LangChain backend adapter.

Run with: pytest tests/test_model_catalog.py -v
"""

import pytest
from langchain_anthropic import ChatAnthropic
from langchain_core.language_models.fake_chat_models import GenericFakeChatModel
from langchain_core.messages import AIMessage
from langchain_openai import ChatOpenAI

from llm_router.config.settings import Config
from llm_router.domain.value_objects import ModelId, ModelWeights
from llm_router.services.llm_backend import ChatBackend, LangChainBackend, message_text
from llm_router.services.model_catalog import (
    MODEL_CATALOG,
    Provider,
    build_backend,
    build_registry,
)


class CatalogTestConfig(Config):
    OPENAI_KEY = "sk-test"
    ANTHROPIC_KEY = "sk-ant-test"


class TestCatalog:
    def test_catalog_order_and_weights(self):
        assert [entry.model_id for entry in MODEL_CATALOG] == [
            ModelId.GPT35,
            ModelId.GPT4,
            ModelId.CLAUDE3_SONNET,
            ModelId.CLAUDE3_HAIKU,
        ]
        weights = {entry.model_id: entry.weights for entry in MODEL_CATALOG}
        assert weights[ModelId.GPT35] == ModelWeights(0.3, 0.8, 0.9)
        assert weights[ModelId.GPT4] == ModelWeights(0.9, 0.3, 0.2)
        assert weights[ModelId.CLAUDE3_SONNET] == ModelWeights(0.8, 0.5, 0.5)
        assert weights[ModelId.CLAUDE3_HAIKU] == ModelWeights(0.4, 0.9, 0.8)

    def test_build_registry_uses_supplied_backends(self, make_backend):
        fakes = {entry.model_id: make_backend() for entry in MODEL_CATALOG}

        registry = build_registry(backends=fakes, config=CatalogTestConfig)

        assert registry.frozen
        assert len(registry) == 4
        assert registry.get(ModelId.CLAUDE3_HAIKU).backend is fakes[ModelId.CLAUDE3_HAIKU]
        assert registry.get("gpt4").description == "GPT-4"

    def test_build_backend_per_provider(self):
        by_provider = {entry.provider: entry for entry in MODEL_CATALOG}

        openai_backend = build_backend(by_provider[Provider.OPENAI], CatalogTestConfig)
        anthropic_backend = build_backend(
            by_provider[Provider.ANTHROPIC], CatalogTestConfig
        )

        assert isinstance(openai_backend._chat_model, ChatOpenAI)
        assert isinstance(anthropic_backend._chat_model, ChatAnthropic)
        assert openai_backend.name == CatalogTestConfig.GPT35_MODEL_NAME
        assert isinstance(openai_backend, ChatBackend)


class TestLangChainBackend:
    @pytest.mark.asyncio
    async def test_invoke_returns_message_text(self):
        chat_model = GenericFakeChatModel(messages=iter([AIMessage(content="Paris")]))
        backend = LangChainBackend(chat_model, name="fake")

        assert await backend.invoke("Capital of France?") == "Paris"

    @pytest.mark.asyncio
    async def test_stream_yields_non_empty_fragments(self):
        chat_model = GenericFakeChatModel(
            messages=iter([AIMessage(content="hello streaming world")])
        )
        backend = LangChainBackend(chat_model, name="fake")

        fragments = [fragment async for fragment in backend.stream("hi")]

        assert len(fragments) > 1
        assert all(fragments)
        assert "".join(fragments) == "hello streaming world"


class TestMessageText:
    def test_plain_string(self):
        assert message_text("hi") == "hi"

    def test_none(self):
        assert message_text(None) == ""

    def test_content_blocks(self):
        content = [
            {"type": "text", "text": "Hello "},
            {"type": "tool_use", "id": "x"},
            "world",
        ]
        assert message_text(content) == "Hello world"
