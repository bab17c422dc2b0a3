"""
Model Invoker - Runs a query on the selected (or forced) backend.

Flow:
    text ─► ModelSelector (skipped when force_model is given)
         ─► ModelRegistry.get(model_id) ─► backend.invoke / backend.stream

Failures are never retried and never re-routed to another model:
UnknownModelError, SelectionError and InvocationError reach the caller.

Usage:
    invoker = ModelInvoker(registry, selector)
    reply = await invoker.run_query("explain the CAP theorem")

    stream = await invoker.stream_query("hi", force_model="claude3Haiku")
    async for fragment in stream:
        ...
"""

import logging
import time
from typing import AsyncIterator, Optional

from llm_router.domain.exceptions import InvocationError, UnknownModelError
from llm_router.domain.value_objects import ModelId, SelectionOutcome, SelectionStrategy
from llm_router.observability.metrics import (
    MetricsErrorType,
    decrement_active_queries,
    increment_active_queries,
    increment_error,
    increment_model_selection,
    observe_invocation_latency,
)
from llm_router.services.llm_backend import FragmentStream
from llm_router.services.model_registry import ModelRegistry, RegisteredModel
from llm_router.services.model_selector import ModelSelector

logger = logging.getLogger(__name__)


class ModelInvoker:
    def __init__(self, registry: ModelRegistry, selector: ModelSelector):
        self.registry = registry
        self.selector = selector

    async def resolve_model(
        self, text: str, force_model: "Optional[ModelId | str]" = None
    ) -> SelectionOutcome:
        """
        Decide which model will answer.

        A forced model bypasses the selector and must be registered; there is
        no default substitution for an explicit override.

        Raises:
            UnknownModelError: if force_model is not registered
            SelectionError: if delegated selection fails
        """
        if force_model is not None:
            try:
                entry = self.registry.get(force_model)
            except UnknownModelError:
                increment_error(MetricsErrorType.UNKNOWN_MODEL)
                raise
            return SelectionOutcome(
                model_id=entry.model_id,
                score=None,
                strategy=SelectionStrategy.FORCED,
            )
        return await self.selector.select_outcome(text)

    async def run_query(
        self, text: str, force_model: "Optional[ModelId | str]" = None
    ) -> str:
        """Invoke the chosen backend once and return its full reply."""
        entry = await self._prepare(text, force_model)

        increment_active_queries()
        start = time.monotonic()
        try:
            return await entry.backend.invoke(text)
        except Exception as e:
            increment_error(MetricsErrorType.INVOCATION_FAILED)
            logger.error("Model %s failed: %s", entry.model_id, e)
            raise InvocationError(entry.model_id.value) from e
        finally:
            observe_invocation_latency(
                entry.model_id.value, "invoke", time.monotonic() - start
            )
            decrement_active_queries()

    async def stream_query(
        self, text: str, force_model: "Optional[ModelId | str]" = None
    ) -> FragmentStream:
        """
        Start streaming the chosen backend's reply.

        Selection happens here; the backend is only called when the returned
        stream is first pulled.
        """
        entry = await self._prepare(text, force_model)
        return FragmentStream(entry.model_id.value, self._stream_fragments(entry, text))

    async def _prepare(
        self, text: str, force_model: "Optional[ModelId | str]"
    ) -> RegisteredModel:
        outcome = await self.resolve_model(text, force_model)
        entry = self.registry.get(outcome.model_id)
        self._record_selection(outcome)
        return entry

    def _record_selection(self, outcome: SelectionOutcome) -> None:
        logger.info(
            "Selected model: %s (strategy=%s, score=%s, default=%s)",
            outcome.model_id,
            outcome.strategy.value,
            "n/a" if outcome.score is None else f"{outcome.score:.3f}",
            outcome.used_default,
        )
        try:
            increment_model_selection(outcome.model_id.value, outcome.strategy.value)
        except Exception as e:
            logger.warning("Failed to record model selection metric: %s", e)

    async def _stream_fragments(
        self, entry: RegisteredModel, text: str
    ) -> AsyncIterator[str]:
        increment_active_queries()
        start = time.monotonic()
        fragments = entry.backend.stream(text)
        try:
            async for fragment in fragments:
                yield fragment
        except Exception:
            increment_error(MetricsErrorType.INVOCATION_FAILED)
            raise
        finally:
            observe_invocation_latency(
                entry.model_id.value, "stream", time.monotonic() - start
            )
            decrement_active_queries()
            # async for does not close the backend iterator when we are closed
            close = getattr(fragments, "aclose", None)
            if close is not None:
                await close()
