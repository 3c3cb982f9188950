"""Core utilities and security modules."""

from app.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    InvalidBookingStatus,
    NotFoundError,
    NotificationError,
    StorageError,
    ValidationError,
)
from app.core.security import (
    SessionUser,
    create_access_token,
    create_session_token,
    session_from_token,
    verify_token,
)

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "InvalidBookingStatus",
    "NotFoundError",
    "NotificationError",
    "StorageError",
    "ValidationError",
    "SessionUser",
    "create_access_token",
    "create_session_token",
    "session_from_token",
    "verify_token",
]
