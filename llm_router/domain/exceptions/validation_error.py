"""
DomainValidationError - Raised when a domain rule is violated.
Maps to: HTTP 422 Unprocessable Entity
"""


class DomainValidationError(Exception):
    """Exception raised for domain validation errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
