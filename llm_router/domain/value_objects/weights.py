"""
Weights Value Object - (complexity, speed, cost) triple, each in [0, 1].

ModelWeights are the static, hand-tuned characteristics of a backend.
QueryWeights are what a query asks for, recomputed on every call.
"""

from dataclasses import dataclass

from llm_router.domain.exceptions.validation_error import DomainValidationError


@dataclass(frozen=True)
class Weights:
    complexity: float
    speed: float
    cost: float  # higher = cheaper

    def __post_init__(self):
        for name in ("complexity", "speed", "cost"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise DomainValidationError(
                    f"Weight {name}={value} is outside [0, 1]"
                )

    def dot(self, other: "Weights") -> float:
        """Score one triple against another."""
        return (
            self.complexity * other.complexity
            + self.speed * other.speed
            + self.cost * other.cost
        )

    def as_dict(self) -> dict[str, float]:
        return {"complexity": self.complexity, "speed": self.speed, "cost": self.cost}


ModelWeights = Weights
QueryWeights = Weights
