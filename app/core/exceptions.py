"""
Core exceptions for the application.
"""


class APIException(Exception):
    """Base class for API exceptions."""
    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class PermissionDeniedError(APIException):
    """Raised when a principal doesn't have permission to perform an action."""
    def __init__(self, message: str = "Permission denied"):
        super().__init__(message)


class InputValidationError(APIException):
    """Raised when operation arguments fail coercion.

    ``errors`` maps each failing argument name to its message.
    """
    def __init__(
        self,
        message: str = "Input validation failed",
        field: str | None = None,
        errors: dict[str, str] | None = None,
    ):
        self.field = field
        self.errors = errors or {}
        super().__init__(message)


class AuthenticationError(APIException):
    """Raised when authentication fails."""
    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message)


class RegistrationError(APIException):
    """Raised when an operation cannot be added to the registry."""
    def __init__(self, message: str = "Operation registration failed"):
        super().__init__(message)
