"""
InvocationError - Raised when the selected backend fails to produce text.
Maps to: HTTP 502 Bad Gateway
"""


class InvocationError(Exception):
    """Backend invocation failed; the provider error is chained."""

    def __init__(self, model_id: str, message: str | None = None):
        super().__init__(message or f"Invocation of model {model_id!r} failed")
        self.model_id = model_id
