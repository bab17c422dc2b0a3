"""
Centralized prompt management.

- Routing (delegated model selection)
"""

from llm_router.prompts.routing import RoutingPrompts

__all__ = [
    "RoutingPrompts",
]
