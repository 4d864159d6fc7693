"""
Domain exceptions raised by the service layer.

Each exception carries the HTTP status and error code used by
``core.middleware.error_handling`` to render the standard error envelope.
"""

from typing import Any, Optional

from fastapi import status


class MiseError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "BAD_REQUEST"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class UnauthenticatedError(MiseError):
    """Raised when a mutation is attempted without a resolvable caller."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHENTICATED"


class ForbiddenError(MiseError):
    """Raised when the caller lacks the role or ownership an action needs."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class NotFoundError(MiseError):
    """Raised when a referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class ConflictError(MiseError):
    """Raised when a duplicate-prevention check finds an existing record."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


class InvalidTransition(ConflictError):
    """Raised when a lifecycle transition is not allowed from the current state."""

    code = "INVALID_TRANSITION"


class DomainValidationError(MiseError):
    """Raised when structurally valid input breaks a domain invariant."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "VALIDATION_ERROR"
