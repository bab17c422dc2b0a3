import hashlib
import hmac
import os
import sys
import time

import pytest

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__) + "/.."))

from dishka import Provider, Scope, make_async_container, provide
from fastapi.testclient import TestClient

from llm_router.adapters.slack.slack_adapter import SlackBotAdapter
from llm_router.domain.value_objects import ModelId, ModelWeights
from llm_router.fastapi_app import create_fastapi_app
from llm_router.services.model_invoker import ModelInvoker
from llm_router.services.model_registry import ModelRegistry
from llm_router.services.model_selector import ModelSelector

SLACK_SIGNING_SECRET = "test-signing-secret"


class FakeBackend:
    """ChatBackend double that records every call."""

    def __init__(self, reply="ok", fragments=None, error=None, fail_after=None):
        self.reply = reply
        self.fragments = list(fragments) if fragments is not None else [reply]
        self.error = error
        self.fail_after = fail_after
        self.invoke_calls = []
        self.stream_calls = []
        self.stream_closed = False

    async def invoke(self, prompt):
        self.invoke_calls.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply

    async def stream(self, prompt):
        self.stream_calls.append(prompt)
        try:
            for index, fragment in enumerate(self.fragments):
                if self.error is not None and index == (self.fail_after or 0):
                    raise self.error
                yield fragment
            if self.error is not None and self.fail_after == len(self.fragments):
                raise self.error
        finally:
            self.stream_closed = True


class StubProvider(Provider):
    """Hands pre-built collaborators to the FastAPI routes."""

    def __init__(self, registry, selector, invoker, adapter):
        super().__init__()
        self._registry = registry
        self._selector = selector
        self._invoker = invoker
        self._adapter = adapter

    @provide(scope=Scope.APP)
    def get_registry(self) -> ModelRegistry:
        return self._registry

    @provide(scope=Scope.APP)
    def get_selector(self) -> ModelSelector:
        return self._selector

    @provide(scope=Scope.APP)
    def get_invoker(self) -> ModelInvoker:
        return self._invoker

    @provide(scope=Scope.APP)
    def get_adapter(self) -> SlackBotAdapter:
        return self._adapter


def slack_signature(body: bytes, timestamp: str, secret: str = SLACK_SIGNING_SECRET):
    basestring = f"v0:{timestamp}:{body.decode('utf-8')}"
    digest = hmac.new(
        secret.encode("utf-8"), basestring.encode("utf-8"), hashlib.sha256
    ).hexdigest()
    return f"v0={digest}"


def signed_headers(body: bytes, timestamp: str | None = None) -> dict:
    timestamp = timestamp or str(int(time.time()))
    return {
        "X-Slack-Request-Timestamp": timestamp,
        "X-Slack-Signature": slack_signature(body, timestamp),
        "Content-Type": "application/json",
    }


@pytest.fixture()
def make_backend():
    """Factory for FakeBackend instances."""
    return FakeBackend


@pytest.fixture()
def backends():
    return {
        ModelId.GPT35: FakeBackend(reply="gpt35 reply", fragments=["gpt", "35"]),
        ModelId.GPT4: FakeBackend(reply="gpt4 reply", fragments=["gpt", "4"]),
        ModelId.CLAUDE3_SONNET: FakeBackend(
            reply="sonnet reply", fragments=["son", "net"]
        ),
    }


@pytest.fixture()
def registry(backends):
    """Three models registered as gpt35 (fast/cheap), gpt4 (reasoning), sonnet."""
    registry = ModelRegistry()
    registry.register(
        ModelId.GPT35, backends[ModelId.GPT35], ModelWeights(0.2, 0.9, 0.9)
    )
    registry.register(
        ModelId.GPT4, backends[ModelId.GPT4], ModelWeights(0.9, 0.2, 0.1)
    )
    registry.register(
        ModelId.CLAUDE3_SONNET,
        backends[ModelId.CLAUDE3_SONNET],
        ModelWeights(0.8, 0.5, 0.5),
    )
    registry.freeze()
    return registry


@pytest.fixture()
def selector(registry):
    return ModelSelector(registry, default_model=ModelId.GPT35)


@pytest.fixture()
def invoker(registry, selector):
    return ModelInvoker(registry, selector)


@pytest.fixture()
def slack_signing_secret(monkeypatch):
    from llm_router.config.settings import Config

    monkeypatch.setattr(Config, "SLACK_SIGNING_SECRET", SLACK_SIGNING_SECRET)
    monkeypatch.setattr(Config, "SLACK_ENABLED", True)
    return SLACK_SIGNING_SECRET


@pytest.fixture()
def make_client(registry, selector, invoker):
    """Build a TestClient whose container serves the given collaborators."""

    def _make(adapter=None, invoker_override=None):
        provider = StubProvider(
            registry, selector, invoker_override or invoker, adapter
        )
        container = make_async_container(provider)
        app = create_fastapi_app(container=container, warm_up=False)
        return TestClient(app)

    return _make
