"""Pydantic schemas for API validation."""

from app.schemas.booking import (
    BookingCommentCreate,
    BookingCommentResponse,
    BookingCommentReview,
    BookingDetailResponse,
    BookingFieldUpdate,
    BookingFieldUpdateResponse,
    BookingResponse,
)
from app.schemas.review import (
    ReviewCreate,
    ReviewCreateResponse,
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdateResponse,
)

__all__ = [
    # Booking
    "BookingFieldUpdate",
    "BookingFieldUpdateResponse",
    "BookingResponse",
    "BookingDetailResponse",
    "BookingCommentCreate",
    "BookingCommentReview",
    "BookingCommentResponse",
    # Review
    "ReviewCreate",
    "ReviewCreateResponse",
    "ReviewUpdateResponse",
    "ReviewResponse",
    "ReviewListResponse",
]
