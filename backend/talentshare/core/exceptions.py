"""
Domain exceptions raised by the service layer.

Every exception carries a stable ``code`` and a human readable ``message``.
The API layer maps the class to an HTTP status and renders the
``{"success": false, "error": ...}`` envelope, so services never deal with
HTTP concerns directly.
"""

from typing import Any, Dict, Optional

from fastapi import status


class DomainError(Exception):
    """Base class for all business-rule failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(code={self.code}, message={self.message!r})>"


class NotFoundError(DomainError):
    """Referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"


class ForbiddenError(DomainError):
    """Caller is authenticated but does not own the resource."""

    status_code = status.HTTP_403_FORBIDDEN
    default_code = "FORBIDDEN"


class UnauthenticatedError(DomainError):
    """Missing, invalid or expired credential."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = "UNAUTHENTICATED"


class BusinessValidationError(DomainError):
    """Malformed input or out-of-range field."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "VALIDATION_ERROR"


class InvalidStateError(BusinessValidationError):
    """Operation not allowed in the entity's current state."""

    default_code = "INVALID_STATE"


class ConflictError(DomainError):
    """
    Rule conflict with existing data: duplicate booking or review,
    capacity exceeded, self-booking.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "CONFLICT"


# Stable conflict codes
CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
DUPLICATE_BOOKING = "DUPLICATE_BOOKING"
SELF_BOOKING_FORBIDDEN = "SELF_BOOKING_FORBIDDEN"
DUPLICATE_REVIEW = "DUPLICATE_REVIEW"
EMAIL_TAKEN = "EMAIL_TAKEN"
INVALID_SLOT = "INVALID_SLOT"
