"""
Model Selector - Picks the registered model that best fits a query.

Two strategies, fixed at construction:
1. Objective (default) - score every model against the estimated QueryWeights,
   no LLM call. First strictly-greater score wins, in registration order.
2. Delegated - ask a router LLM to name a model; an answer that is not a
   registered id falls back to the default model.

Usage:
    selector = ModelSelector(registry, default_model=ModelId.GPT35)
    model_id = await selector.select("explain quantum tunnelling")
"""

import logging
from typing import Iterable, Optional

from llm_router.domain.exceptions import (
    DomainValidationError,
    SelectionError,
    UnknownModelError,
)
from llm_router.domain.value_objects import (
    ModelId,
    ModelWeights,
    QueryWeights,
    SelectionOutcome,
    SelectionStrategy,
)
from llm_router.observability.metrics import (
    FallbackReason,
    MetricsErrorType,
    increment_error,
    increment_selection_fallback,
)
from llm_router.prompts.routing import RoutingPrompts
from llm_router.services import complexity_estimator
from llm_router.services.llm_backend import ChatBackend
from llm_router.services.model_registry import ModelRegistry

logger = logging.getLogger(__name__)


def score_models(
    query_weights: QueryWeights,
    candidates: Iterable[tuple[ModelId, ModelWeights]],
    default_model: ModelId,
) -> tuple[ModelId, float]:
    """
    Return the first candidate whose score strictly beats every earlier one.

    The running maximum starts at (default_model, 0.0): a candidate must score
    above zero to replace the default, and ties keep the earlier entry.
    """
    best_model = default_model
    best_score = 0.0
    for model_id, weights in candidates:
        score = query_weights.dot(weights)
        if score > best_score:
            best_model = model_id
            best_score = score
    return best_model, best_score


class ModelSelector:
    """
    Selects a ModelId for each query.

    Attributes:
        registry: Frozen ModelRegistry consulted for candidates
        default_model: Returned on empty registry or unusable router answer
        use_objective_selection: Strategy flag
    """

    def __init__(
        self,
        registry: ModelRegistry,
        default_model: "ModelId | str",
        use_objective_selection: bool = True,
        router_backend: Optional[ChatBackend] = None,
    ):
        """
        Args:
            registry: Model registry
            default_model: Fallback model id; must be registered unless the
                registry is empty
            use_objective_selection: False selects the delegated strategy
            router_backend: Backend asked to name a model (delegated only)
        """
        self.registry = registry
        self.default_model = ModelId.parse(default_model)
        self.use_objective_selection = use_objective_selection
        self._router_backend = router_backend

        if len(registry) and self.default_model not in registry:
            raise UnknownModelError(str(default_model))
        if not use_objective_selection and router_backend is None:
            raise DomainValidationError(
                "Delegated selection requires a router backend"
            )

    @property
    def strategy(self) -> SelectionStrategy:
        if self.use_objective_selection:
            return SelectionStrategy.OBJECTIVE
        return SelectionStrategy.DELEGATED

    async def select(self, text: str) -> ModelId:
        outcome = await self.select_outcome(text)
        return outcome.model_id

    async def select_outcome(self, text: str) -> SelectionOutcome:
        """
        Select a model and report how it was chosen.

        Raises:
            SelectionError: if the delegated strategy's router call fails
        """
        if self.use_objective_selection:
            return self.select_objective(text)
        return await self.select_delegated(text)

    def select_objective(self, text: str) -> SelectionOutcome:
        if not len(self.registry):
            increment_selection_fallback(FallbackReason.EMPTY_REGISTRY)
            logger.warning(
                "No models registered, using default %s", self.default_model
            )
            return SelectionOutcome(
                model_id=self.default_model,
                score=None,
                strategy=SelectionStrategy.OBJECTIVE,
                used_default=True,
            )

        query_weights = complexity_estimator.estimate(text)
        model_id, score = score_models(
            query_weights, self.registry.list_all(), self.default_model
        )
        logger.debug(
            "Objective selection: query=%s -> %s (score=%.3f)",
            query_weights,
            model_id,
            score,
        )
        return SelectionOutcome(
            model_id=model_id,
            score=score,
            strategy=SelectionStrategy.OBJECTIVE,
            used_default=score == 0.0,
        )

    async def select_delegated(self, text: str) -> SelectionOutcome:
        prompt = RoutingPrompts.select_model(self.registry, text)
        try:
            answer = await self._router_backend.invoke(prompt)
        except Exception as e:
            increment_error(MetricsErrorType.SELECTION_FAILED)
            logger.error("Router model call failed: %s", e)
            raise SelectionError(f"Router model call failed: {e}") from e

        candidate = (answer or "").strip()
        logger.info("Router model answered %r", candidate)

        if candidate in self.registry:
            return SelectionOutcome(
                model_id=ModelId.parse(candidate),
                score=None,
                strategy=SelectionStrategy.DELEGATED,
            )

        increment_selection_fallback(FallbackReason.ROUTER_UNKNOWN_ANSWER)
        logger.warning(
            "Router answer %r is not a registered model, using default %s",
            candidate,
            self.default_model,
        )
        return SelectionOutcome(
            model_id=self.default_model,
            score=None,
            strategy=SelectionStrategy.DELEGATED,
            used_default=True,
        )
