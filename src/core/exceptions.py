"""Custom exceptions for the application."""

from typing import Any, Dict, Optional


class BaseAPIException(Exception):
    """Base exception for all API exceptions."""

    def __init__(
        self,
        message: str = "An error occurred",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BaseAPIException):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 422, details)


class NotFoundError(BaseAPIException):
    """Raised when a resource is not found."""

    def __init__(self, message: str = "Resource not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 404, details)


class UnauthorizedError(BaseAPIException):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 401, details)


class ForbiddenError(BaseAPIException):
    """Raised when user lacks permissions."""

    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 403, details)


class BadRequestError(BaseAPIException):
    """Raised when the request is malformed."""

    def __init__(self, message: str = "Bad request", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 400, details)


class ServiceUnavailableError(BaseAPIException):
    """Raised when a service is temporarily unavailable."""

    def __init__(self, message: str = "Service unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 503, details)


class CatalogLoadError(ServiceUnavailableError):
    """Raised when the node catalog cannot be read from its backing store."""

    def __init__(self, message: str = "Node catalog unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class ReferenceDataError(BaseAPIException):
    """Raised when packaged reference data (node table, starter templates) is inconsistent."""

    def __init__(self, message: str = "Invalid node reference data", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, 500, details)
