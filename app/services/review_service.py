"""Event feedback (review) service."""

import logging
import math
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, StorageError, ValidationError
from app.domain.review_segment import (
    OVERALL_STARS_RANGE,
    RECOMMEND_SCORE_RANGE,
    compute_segment,
    optional_rating,
    require_rating,
)
from app.models.review import EventFeedback
from app.schemas.review import ReviewCreate

logger = logging.getLogger(__name__)

FALSY_FORM_VALUES = (False, 0, "")

IMPROVE_MAX_LENGTH = 1000
TEXT_MAX_LENGTH = 2000
ADMIN_LIST_LIMIT = 500

# Fields the follow-up form may set after the review exists
PATCH_ALLOWED_FIELDS = frozenset(
    {
        "testimonial_ok",
        "testimonial_name",
        "testimonial_company",
        "low_satisfaction_details",
        "follow_up_ok",
        "follow_up_name",
        "follow_up_contact",
        "ambience_vibe_stars",
        "tech_equipment_stars",
        "flow_on_the_day_stars",
        "value_for_money_stars",
        "best_part",
    }
)

NOTIFICATION_FIELDS = (
    "id",
    "locale",
    "segment",
    "overall_stars",
    "recommend_score",
    "booking_communication_stars",
    "staff_service_stars",
    "space_cleanliness_stars",
    "improve_one_thing",
    "low_satisfaction_details",
    "follow_up_name",
    "follow_up_contact",
    "ambience_vibe_stars",
    "tech_equipment_stars",
    "flow_on_the_day_stars",
    "value_for_money_stars",
    "best_part",
)


def is_truthy(value: Any) -> bool:
    """Form truthiness: false, 0, NaN and "" are false; anything else, empty
    lists and objects included, is true."""
    if isinstance(value, float) and math.isnan(value):
        return False
    if isinstance(value, (list, dict)):
        return True
    return value not in FALSY_FORM_VALUES


class ReviewService:
    """Service for White Lotus event feedback."""

    def build_feedback(self, data: ReviewCreate) -> EventFeedback:
        """Validate a submitted review and derive its segment.

        Raises:
            ValidationError: If any rating is missing or out of range
        """
        overall_stars = require_rating("overall_stars", data.overall_stars, OVERALL_STARS_RANGE)
        recommend_score = require_rating(
            "recommend_score", data.recommend_score, RECOMMEND_SCORE_RANGE
        )
        booking_communication_stars = optional_rating(
            "booking_communication_stars", data.booking_communication_stars
        )
        staff_service_stars = optional_rating("staff_service_stars", data.staff_service_stars)
        space_cleanliness_stars = optional_rating(
            "space_cleanliness_stars", data.space_cleanliness_stars
        )

        improve_one_thing = None
        if isinstance(data.improve_one_thing, str):
            improve_one_thing = data.improve_one_thing.strip()[:IMPROVE_MAX_LENGTH] or None

        return EventFeedback(
            locale="is" if data.locale == "is" else "en",
            overall_stars=overall_stars,
            recommend_score=recommend_score,
            booking_communication_stars=booking_communication_stars,
            staff_service_stars=staff_service_stars,
            space_cleanliness_stars=space_cleanliness_stars,
            improve_one_thing=improve_one_thing,
            segment=compute_segment(overall_stars, recommend_score).value,
        )

    async def submit_review(self, db: AsyncSession, data: ReviewCreate) -> EventFeedback:
        """Store a new review."""
        review = self.build_feedback(data)
        db.add(review)
        await self._commit(db, review, "Failed to store feedback")
        logger.info(f"Review {review.id} stored (segment={review.segment})")
        return review

    def coerce_updates(self, body: dict[str, Any]) -> dict[str, Any]:
        """Keep the allow-listed follow-up fields and normalise their values.

        ``*_stars`` become ints 1-5 or None, ``*_ok`` become bools or None,
        everything else a trimmed string or None. Unknown keys are dropped.

        Raises:
            ValidationError: If a kept value has the wrong shape or nothing is left
        """
        updates: dict[str, Any] = {}
        for key, value in body.items():
            if key == "id" or key not in PATCH_ALLOWED_FIELDS:
                continue

            if key.endswith("_stars"):
                updates[key] = optional_rating(key, value)
            elif key.endswith("_ok"):
                updates[key] = None if value is None else is_truthy(value)
            elif isinstance(value, str):
                updates[key] = value.strip()[:TEXT_MAX_LENGTH] or None
            elif value is None:
                updates[key] = None
            else:
                raise ValidationError(f"{key} must be a string or null")

        if not updates:
            raise ValidationError("No valid fields to update")
        return updates

    async def update_review(
        self,
        db: AsyncSession,
        review_id: Any,
        body: dict[str, Any],
    ) -> EventFeedback:
        """Apply follow-up fields to an existing review.

        The segment is never recomputed; the scores it depends on are not
        patchable.

        Raises:
            ValidationError: Bad id, bad value or no usable field
            NotFoundError: Unknown review
            StorageError: The write failed
        """
        if not review_id or not isinstance(review_id, str):
            raise ValidationError("id is required")
        updates = self.coerce_updates(body)
        try:
            feedback_id = UUID(review_id)
        except ValueError:
            raise ValidationError("id must be a valid review id")

        result = await db.execute(select(EventFeedback).where(EventFeedback.id == feedback_id))
        review = result.scalar_one_or_none()
        if review is None:
            raise NotFoundError("Review", review_id)

        for key, value in updates.items():
            setattr(review, key, value)
        await self._commit(db, review, "Failed to update feedback")
        logger.info(f"Review {review.id} updated: {', '.join(sorted(updates))}")
        return review

    async def list_reviews(self, db: AsyncSession, limit: int = ADMIN_LIST_LIMIT) -> list[EventFeedback]:
        """Newest reviews first."""
        result = await db.execute(
            select(EventFeedback).order_by(EventFeedback.created_at.desc()).limit(limit)
        )
        return list(result.scalars().all())

    @staticmethod
    def notification_payload(review: EventFeedback) -> dict[str, Any]:
        """Plain dict of the fields the review email shows."""
        payload = {name: getattr(review, name) for name in NOTIFICATION_FIELDS}
        payload["id"] = str(review.id)
        return payload

    @staticmethod
    async def _commit(db: AsyncSession, instance: object, message: str) -> None:
        """Commit pending changes and reload server-generated columns."""
        try:
            await db.flush()
            await db.commit()
            await db.refresh(instance)
        except SQLAlchemyError as e:
            logger.error(f"{message}: {e}")
            raise StorageError(message, reason=str(e)) from e


review_service = ReviewService()
