"""Booking comment moderation states.

States: pending → accepted | declined
Admin comments start out accepted.
"""

from app.core.exceptions import ValidationError

COMMENT_REVIEW_STATUSES = {"accepted", "declined"}


def initial_comment_status(is_admin: bool) -> str:
    """Status a freshly posted comment gets."""
    return "accepted" if is_admin else "pending"


def assert_review_status(status: str | None) -> str:
    """Validate the status an admin assigns to a comment."""
    if status not in COMMENT_REVIEW_STATUSES:
        raise ValidationError("Status must be 'accepted' or 'declined'")
    return status
