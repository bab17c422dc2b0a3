"""
SelectionError - Raised when the router LLM call of delegated selection fails.
Maps to: HTTP 502 Bad Gateway
"""


class SelectionError(Exception):
    """Delegated model selection failed; the provider error is chained."""

    def __init__(self, message: str = "Model selection failed"):
        super().__init__(message)
