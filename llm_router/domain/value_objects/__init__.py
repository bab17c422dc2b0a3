"""
VALUE OBJECTS - Immutable domain types

Each value object:
- Is compared by value
- Is immutable (frozen dataclass or enum)
- Validates itself on creation
"""

from llm_router.domain.value_objects.model_id import ModelId
from llm_router.domain.value_objects.weights import Weights, ModelWeights, QueryWeights
from llm_router.domain.value_objects.selection_outcome import (
    SelectionOutcome,
    SelectionStrategy,
)

__all__ = [
    "ModelId",
    "Weights",
    "ModelWeights",
    "QueryWeights",
    "SelectionOutcome",
    "SelectionStrategy",
]
