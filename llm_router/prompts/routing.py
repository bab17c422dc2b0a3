"""
Routing prompts for delegated model selection.
"""

from typing import Iterable


class RoutingPrompts:
    """Prompts asking a router LLM to name the best model for a query."""

    @staticmethod
    def select_model(models: Iterable, query: str) -> str:
        """
        Generate prompt for picking one registered model.

        Args:
            models: RegisteredModel entries, in registration order
            query: User's message text

        Returns:
            Prompt string; the expected answer is a bare model id
        """
        model_lines = "\n".join(
            f"  - {entry.model_id.value}"
            + (f" ({entry.description})" if entry.description else "")
            for entry in models
        )

        return f"""You are a model router that selects the best AI model for a given query.
Available models:
{model_lines}

Respond only with the model name, no explanation.

## Query
{query}
"""
