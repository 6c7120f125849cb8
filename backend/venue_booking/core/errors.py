"""
Application error taxonomy.

Every failure a client can observe is an ``AppError`` subclass carrying a
machine-readable ``code``, a user-safe ``message``, the HTTP status it maps
to and an optional ``context`` dict with the offending values. The
handlers registered in ``main`` render them as::

    {"error": "<code>", "detail": "<message>", "context": {...}}
"""

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    INVALID_TOKEN = "invalid_token"
    TOKEN_EXPIRED = "token_expired"
    AUTHENTICATION_FAILED = "authentication_failed"
    FORBIDDEN = "forbidden"
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_TRANSITION = "invalid_transition"
    VENUE_UNAVAILABLE = "venue_unavailable"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    INSUFFICIENT_BUDGET = "insufficient_budget"
    INTERNAL_FAILURE = "internal_failure"


class AppError(Exception):
    """Base error with code, status and user-safe message."""

    code: ErrorCode = ErrorCode.INTERNAL_FAILURE
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, **context: Any) -> None:
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict:
        body = {"error": self.code.value, "detail": self.message}
        if self.context:
            body["context"] = self.context
        return body


class Unauthenticated(AppError):
    code = ErrorCode.UNAUTHENTICATED
    status_code = 401
    default_message = "Authentication required"


class InvalidToken(AppError):
    code = ErrorCode.INVALID_TOKEN
    status_code = 401
    default_message = "Invalid token"


class TokenExpired(AppError):
    code = ErrorCode.TOKEN_EXPIRED
    status_code = 401
    default_message = "Token expired"


class AuthenticationFailed(AppError):
    code = ErrorCode.AUTHENTICATION_FAILED
    status_code = 500
    default_message = "Authentication failed"


class Forbidden(AppError):
    code = ErrorCode.FORBIDDEN
    status_code = 403
    default_message = "Access denied"


class ValidationError(AppError):
    code = ErrorCode.VALIDATION_ERROR
    status_code = 400
    default_message = "Invalid request"

    @classmethod
    def for_fields(cls, fields: list[str]) -> "ValidationError":
        return cls(f"Missing or invalid fields: {', '.join(fields)}", fields=fields)


class NotFound(AppError):
    code = ErrorCode.NOT_FOUND
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    code = ErrorCode.CONFLICT
    status_code = 409
    default_message = "Resource was modified concurrently, please retry"


class InvalidTransition(AppError):
    code = ErrorCode.INVALID_TRANSITION
    status_code = 409
    default_message = "Transition not allowed"


class VenueUnavailable(AppError):
    code = ErrorCode.VENUE_UNAVAILABLE
    status_code = 400
    default_message = "This venue is currently unavailable"


class CapacityExceeded(AppError):
    code = ErrorCode.CAPACITY_EXCEEDED
    status_code = 400
    default_message = "Expected attendees exceed venue capacity"


class InsufficientBudget(AppError):
    code = ErrorCode.INSUFFICIENT_BUDGET
    status_code = 400
    default_message = "Budget is insufficient for venue cost"


class InternalFailure(AppError):
    code = ErrorCode.INTERNAL_FAILURE
    status_code = 500
    default_message = "Internal server error"
