"""
DOMAIN EXCEPTIONS - Failures surfaced by selection and invocation.

Presentation layer maps them to HTTP status codes; the Slack adapter maps
them to a generic apology.
"""

from llm_router.domain.exceptions.unknown_model import UnknownModelError
from llm_router.domain.exceptions.selection_error import SelectionError
from llm_router.domain.exceptions.invocation_error import InvocationError
from llm_router.domain.exceptions.validation_error import DomainValidationError
from llm_router.domain.exceptions.configuration_error import ConfigurationError

__all__ = [
    "UnknownModelError",
    "SelectionError",
    "InvocationError",
    "DomainValidationError",
    "ConfigurationError",
]
