"""Observability package for the LLM router."""

from llm_router.observability.metrics import (
    increment_active_queries,
    decrement_active_queries,
    increment_model_selection,
    increment_selection_fallback,
    observe_invocation_latency,
    increment_error,
    get_metrics_content,
    MetricsErrorType,
    FallbackReason,
)

__all__ = [
    "increment_active_queries",
    "decrement_active_queries",
    "increment_model_selection",
    "increment_selection_fallback",
    "observe_invocation_latency",
    "increment_error",
    "get_metrics_content",
    "MetricsErrorType",
    "FallbackReason",
]
