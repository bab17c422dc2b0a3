"""
UnknownModelError - Raised when a requested model id is not registered.
Maps to: HTTP 400 Bad Request
"""


class UnknownModelError(Exception):
    """Raised when a model id is absent from the registry."""

    def __init__(self, model_id: str):
        super().__init__(f"Unknown model: {model_id!r}")
        self.model_id = model_id
