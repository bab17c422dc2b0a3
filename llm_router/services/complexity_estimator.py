"""
Query Complexity Estimator - turns raw message text into QueryWeights.

Each dimension is the fraction of its indicator predicates that hold:

    complexity: len > 200, "analyze", "explain", "compare"   -> multiples of 1/4
    speed:      "quickly", "fast", len < 100                 -> multiples of 1/3
    cost:       "efficient", "simple", len < 50              -> multiples of 1/3

Keyword checks are case-sensitive substring containment ("Analyze" does not
count as "analyze").
"""

from typing import Callable

from llm_router.domain.value_objects import QueryWeights

Indicator = Callable[[str], bool]


def _contains(keyword: str) -> Indicator:
    return lambda text: keyword in text


COMPLEXITY_INDICATORS: tuple[Indicator, ...] = (
    lambda text: len(text) > 200,
    _contains("analyze"),
    _contains("explain"),
    _contains("compare"),
)

SPEED_INDICATORS: tuple[Indicator, ...] = (
    _contains("quickly"),
    _contains("fast"),
    lambda text: len(text) < 100,
)

COST_INDICATORS: tuple[Indicator, ...] = (
    _contains("efficient"),
    _contains("simple"),
    lambda text: len(text) < 50,
)


def _fraction(indicators: tuple[Indicator, ...], text: str) -> float:
    hits = sum(1 for indicator in indicators if indicator(text))
    return hits / len(indicators)


def estimate(text: str) -> QueryWeights:
    """Estimate what a query needs. Pure and deterministic."""
    return QueryWeights(
        complexity=_fraction(COMPLEXITY_INDICATORS, text),
        speed=_fraction(SPEED_INDICATORS, text),
        cost=_fraction(COST_INDICATORS, text),
    )
