"""
SelectionOutcome Value Object - The chosen model and the score that won.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from llm_router.domain.value_objects.model_id import ModelId


class SelectionStrategy(str, Enum):
    OBJECTIVE = "objective"  # heuristic weight scoring, no LLM call
    DELEGATED = "delegated"  # router LLM names the model
    FORCED = "forced"  # caller supplied the model explicitly


@dataclass(frozen=True)
class SelectionOutcome:
    model_id: ModelId
    score: Optional[float]  # None when no scoring took place
    strategy: SelectionStrategy
    used_default: bool = False
