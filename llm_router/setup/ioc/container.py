"""
Dishka DI Container Setup - the composition root.

Every long-lived collaborator is built here once per process (Scope.APP) and
handed to its consumers by reference:

  Config ─► backends ─► ModelRegistry ─► ModelSelector ─► ModelInvoker ─► SlackBotAdapter
                                                                             ▲
                                                           AsyncWebClient ───┘

Routes receive collaborators through FromDishka[...]; nothing is looked up
from module globals.
"""

import logging

from dishka import Provider, Scope, make_async_container, provide, AsyncContainer
from slack_sdk.web.async_client import AsyncWebClient

from llm_router.adapters.slack.slack_adapter import SlackBotAdapter
from llm_router.config.settings import Config
from llm_router.services.model_catalog import build_registry
from llm_router.services.model_invoker import ModelInvoker
from llm_router.services.model_registry import ModelRegistry
from llm_router.services.model_selector import ModelSelector

logger = logging.getLogger(__name__)


class AppProvider(Provider):
    """
    Application dependency provider.

    Args:
        config: Settings class; validated before any backend is built
    """

    def __init__(self, config=Config):
        super().__init__()
        self._config = config

    # ==================== MODELS ====================
    @provide(scope=Scope.APP)
    def get_model_registry(self) -> ModelRegistry:
        """
        Build every backend and the frozen registry.

        - Config.validate() runs first: missing credentials stop startup here
        """
        self._config.validate()
        return build_registry(config=self._config)

    @provide(scope=Scope.APP)
    def get_model_selector(self, registry: ModelRegistry) -> ModelSelector:
        router_backend = None
        if not self._config.USE_OBJECTIVE_SELECTION:
            router_backend = registry.get(self._config.ROUTER_MODEL).backend

        selector = ModelSelector(
            registry,
            default_model=self._config.DEFAULT_MODEL,
            use_objective_selection=self._config.USE_OBJECTIVE_SELECTION,
            router_backend=router_backend,
        )
        logger.info(
            "Model selector ready: strategy=%s, default=%s",
            selector.strategy.value,
            selector.default_model,
        )
        return selector

    @provide(scope=Scope.APP)
    def get_model_invoker(
        self, registry: ModelRegistry, selector: ModelSelector
    ) -> ModelInvoker:
        return ModelInvoker(registry, selector)

    # ==================== SLACK ====================
    @provide(scope=Scope.APP)
    def get_slack_client(self) -> AsyncWebClient:
        return AsyncWebClient(token=self._config.SLACK_BOT_TOKEN)

    @provide(scope=Scope.APP)
    def get_slack_adapter(
        self, invoker: ModelInvoker, client: AsyncWebClient
    ) -> SlackBotAdapter:
        return SlackBotAdapter(
            invoker,
            client,
            stream_responses=self._config.SLACK_STREAM_RESPONSES,
            stream_update_chars=self._config.SLACK_STREAM_UPDATE_CHARS,
        )


def create_container(config=Config) -> AsyncContainer:
    return make_async_container(AppProvider(config))
