"""
backend/app/errors.py

Purpose:
    Typed error taxonomy raised by services and mapped to HTTP responses by
    the exception handlers registered in app.main.
"""

from fastapi import status


class BetPlatformError(Exception):
    """Base class for errors that carry their own HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BetPlatformError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"


class InsufficientFundsError(BetPlatformError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Insufficient balance"


class AuthenticationError(BetPlatformError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class PermissionDeniedError(BetPlatformError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Admin access required"


class NotFoundError(BetPlatformError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(BetPlatformError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already exists"


class InternalError(BetPlatformError):
    """Unexpected failure; the message is redacted outside development."""
