"""API dependencies for sessions and services."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.exceptions import AppException, AuthorizationError
from app.core.security import SessionUser, session_from_token
from app.database import get_db
from app.services.booking_service import BookingService
from app.services.notification_service import NotificationService, get_notification_service
from app.services.review_service import ReviewService, review_service

__all__ = [
    "get_db",
    "get_optional_session",
    "require_admin_session",
    "require_review_viewer",
    "get_booking_service",
    "get_review_service",
]

# Security scheme; absent credentials are allowed (booking-link access)
optional_bearer = HTTPBearer(auto_error=False)


async def get_optional_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(optional_bearer)],
) -> SessionUser | None:
    """Optionally get the signed-in user; an invalid token counts as no session."""
    if not credentials:
        return None

    try:
        return session_from_token(credentials.credentials)
    except AppException:
        return None


async def require_admin_session(
    session: Annotated[SessionUser | None, Depends(get_optional_session)],
) -> SessionUser:
    """Get the current session and verify it is an admin."""
    if session is None or not session.is_admin:
        raise AuthorizationError("Admin access required")
    return session


async def require_review_viewer(
    session: Annotated[SessionUser | None, Depends(get_optional_session)],
) -> SessionUser:
    """Get the current session and verify it may read reviews."""
    if session is None or session.role not in ("admin", "host"):
        raise AuthorizationError("Admin or host access required")
    return session


def get_booking_service(
    notifier: Annotated[NotificationService, Depends(get_notification_service)],
) -> BookingService:
    """Booking service wired to the notification service."""
    return BookingService(notifier)


def get_review_service() -> ReviewService:
    return review_service
