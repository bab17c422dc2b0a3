"""
Prometheus Metrics for the LLM router.

DATA FLOW:
    This file                  presentation/api/metrics.py         Observability Stack
    ─────────                  ────────────────────────────         ───────────────────
    Define metrics ──────────► /metrics endpoint ──────────────►   Prometheus ──► Grafana

METRIC TYPES:
    - Gauge: Value goes up/down (current count, e.g., active queries)
    - Counter: Value only goes up (total count, e.g., selections per model)
    - Histogram: Distribution (for percentiles like P95, e.g., latency)
"""

from prometheus_client import (
    Gauge,
    Histogram,
    Counter,
    generate_latest,
    CONTENT_TYPE_LATEST,
)


# =============================================================================
# METRICS DEFINITIONS
# =============================================================================
ACTIVE_QUERIES = Gauge(
    "llm_router_active_queries", "Number of queries currently being processed"
)

MODEL_SELECTION_TOTAL = Counter(
    "llm_router_model_selection_total",
    "Total number of queries by selected model and selection strategy",
    ["model", "strategy"],
)

SELECTION_FALLBACK_TOTAL = Counter(
    "llm_router_selection_fallback_total",
    "Total number of times the default model was substituted",
    ["reason"],
)

INVOCATION_LATENCY = Histogram(
    "llm_router_invocation_latency_seconds",
    "Latency of backend invocations in seconds",
    ["model", "mode"],
    buckets=[0.5, 1, 2, 5, 10, 20, 30, 60, 120],
)

ERRORS_TOTAL = Counter(
    "llm_router_errors_total",
    "Total number of errors by type",
    ["error_type"],
)


# =============================================================================
# LABEL CONSTANTS
# =============================================================================
class MetricsErrorType:
    """Error type labels for llm_router_errors_total metric."""

    UNKNOWN_MODEL = "unknown_model"
    SELECTION_FAILED = "selection_failed"
    INVOCATION_FAILED = "invocation_failed"


class FallbackReason:
    """Reason labels for llm_router_selection_fallback_total metric."""

    ROUTER_UNKNOWN_ANSWER = "router_unknown_answer"
    EMPTY_REGISTRY = "empty_registry"


# =============================================================================
# RECORDING FUNCTIONS
# =============================================================================
def increment_active_queries():
    """Call when query STARTS. Integration point: ModelInvoker"""
    ACTIVE_QUERIES.inc()


def decrement_active_queries():
    """Call when query ENDS (in finally block). Integration point: ModelInvoker"""
    ACTIVE_QUERIES.dec()


def increment_model_selection(model: str, strategy: str):
    """Call once per query, before invocation. Integration point: ModelInvoker"""
    MODEL_SELECTION_TOTAL.labels(model=model, strategy=strategy).inc()


def increment_selection_fallback(reason: str):
    """Call when the default model is substituted. Integration point: ModelSelector"""
    SELECTION_FALLBACK_TOTAL.labels(reason=reason).inc()


def observe_invocation_latency(model: str, mode: str, duration: float):
    """Call after a backend call completes or fails. mode: "invoke" | "stream" """
    INVOCATION_LATENCY.labels(model=model, mode=mode).observe(duration)


def increment_error(error_type: str):
    """
    Call to record an error occurrence.

    Integration points:
        - services/model_selector.py: selection_failed
        - services/model_invoker.py: unknown_model, invocation_failed

    Args:
        error_type: One of MetricsErrorType
    """
    ERRORS_TOTAL.labels(error_type=error_type).inc()


# =============================================================================
# HELPER FOR /metrics ENDPOINT
# =============================================================================
def get_metrics_content():
    """
    Generate Prometheus metrics output.

    Called by: presentation/api/metrics.py

    Returns:
        Tuple of (content_bytes, content_type_string)
    """
    return generate_latest(), CONTENT_TYPE_LATEST


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
