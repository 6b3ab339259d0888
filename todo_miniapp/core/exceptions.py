"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Each one carries a stable machine-readable code; the HTTP status is
assigned in exception_handlers.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found (or is not owned by the caller)."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class AuthenticationError(ApplicationError):
    """Raised when a credential or session is missing, invalid or expired."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message, code="AUTH_UNAUTHORIZED")


class AuthorizationError(ApplicationError):
    """Raised when an authenticated identity is not allowed in."""

    def __init__(self, message: str = "Permission denied") -> None:
        super().__init__(message, code="AUTHZ_FORBIDDEN")


class InternalError(ApplicationError):
    """Raised for unexpected infrastructure failures."""

    def __init__(self, message: str = "Internal server error", code: str = "SYS_INTERNAL_ERROR") -> None:
        super().__init__(message, code=code)


class DatabaseError(InternalError):
    """Raised when a database operation fails."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message, code="SYS_DATABASE_ERROR")
