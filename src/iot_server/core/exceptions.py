"""Service exceptions mapped to HTTP status codes by the error middleware."""
from __future__ import annotations


class ServiceError(Exception):
    """Base error for the service layer."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class BadRequestError(ServiceError):
    """Malformed request: bad id, invalid body or mismatched references."""

    status_code = 400
    message = "Bad request"


class UnauthorizedError(ServiceError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    message = "Unauthorized"


class ForbiddenError(ServiceError):
    """Authenticated user may not touch the resource."""

    status_code = 403
    message = "Access forbidden"


class NotFoundError(ServiceError):
    """Requested entity is missing."""

    status_code = 404
    message = "Resource not found"


class RepositoryError(ServiceError):
    """Raised when repository operations fail."""
