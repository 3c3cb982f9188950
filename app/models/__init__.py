"""Database models."""

from app.models.booking import Booking, BookingComment
from app.models.review import EventFeedback

__all__ = [
    # Booking
    "Booking",
    "BookingComment",
    # Review
    "EventFeedback",
]
