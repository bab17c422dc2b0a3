"""
ModelId Value Object - Closed set of model identifiers the service can register.
"""

from enum import Enum

from llm_router.domain.exceptions.unknown_model import UnknownModelError


class ModelId(str, Enum):
    """Stable model keys. Values are what the router LLM is asked to answer with."""

    GPT35 = "gpt35"
    GPT4 = "gpt4"
    CLAUDE3_SONNET = "claude3Sonnet"
    CLAUDE3_HAIKU = "claude3Haiku"

    @classmethod
    def parse(cls, value: "str | ModelId") -> "ModelId":
        """Convert a raw string to a ModelId.

        Raises:
            UnknownModelError: if value names no ModelId
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownModelError(str(value)) from None

    @classmethod
    def is_known(cls, value: "str | ModelId") -> bool:
        if isinstance(value, cls):
            return True
        return value in cls._value2member_map_

    def __str__(self) -> str:
        return self.value
