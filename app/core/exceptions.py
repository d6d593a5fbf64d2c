"""Custom exceptions for the PipeDesk CRM application."""


class CRMException(Exception):
    """Base exception for PipeDesk application."""

    pass


class ValidationError(CRMException):
    """Raised when validation fails."""

    pass


class NotFoundError(CRMException):
    """Raised when a resource is not found."""

    pass


class ConflictError(CRMException):
    """Raised when an operation would break a reference or uniqueness rule."""

    pass


class DatabaseError(CRMException):
    """Raised when a database operation fails."""

    pass


class ServiceError(CRMException):
    """Raised when a service operation fails."""

    pass


class ConfigurationError(CRMException):
    """Raised when configuration is invalid."""

    pass


class StorageError(CRMException):
    """Raised when a blob storage operation fails."""

    pass


class AuthenticationError(CRMException):
    """Raised when authentication fails.

    ``code`` carries the short auth error code (``auth/wrong-password`` etc.)
    used to pick a user-facing message.
    """

    def __init__(self, message: str = "Authentication failed.", code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class AuthorizationError(CRMException):
    """Raised when an authenticated user lacks a required scope."""

    pass
