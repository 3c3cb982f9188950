"""Review-related Pydantic schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


def _alias(snake: str, camel: str) -> Any:
    return Field(default=None, validation_alias=AliasChoices(snake, camel))


class ReviewCreate(BaseModel):
    """Schema for submitting a review.

    Accepts snake_case or camelCase keys. Ratings may arrive as numbers or
    numeric strings; the review service validates them.
    """

    model_config = ConfigDict(extra="ignore")

    locale: Any = None
    overall_stars: Any = _alias("overall_stars", "overallStars")
    recommend_score: Any = _alias("recommend_score", "recommendScore")
    booking_communication_stars: Any = _alias(
        "booking_communication_stars", "bookingCommunicationStars"
    )
    staff_service_stars: Any = _alias("staff_service_stars", "staffServiceStars")
    space_cleanliness_stars: Any = _alias("space_cleanliness_stars", "spaceCleanlinessStars")
    improve_one_thing: Any = _alias("improve_one_thing", "improveOneThing")


class ReviewCreateResponse(BaseModel):
    """Schema for a stored review."""

    id: UUID
    segment: str


class ReviewUpdateResponse(BaseModel):
    """Schema for a follow-up update."""

    id: UUID
    success: bool = True


class ReviewResponse(BaseModel):
    """Schema for review response (admin listing)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime | None
    updated_at: datetime | None
    locale: str | None
    segment: str
    overall_stars: int
    recommend_score: int
    booking_communication_stars: int | None
    staff_service_stars: int | None
    space_cleanliness_stars: int | None
    improve_one_thing: str | None
    testimonial_ok: bool | None
    testimonial_name: str | None
    testimonial_company: str | None
    low_satisfaction_details: str | None
    follow_up_ok: bool | None
    follow_up_name: str | None
    follow_up_contact: str | None
    ambience_vibe_stars: int | None
    tech_equipment_stars: int | None
    flow_on_the_day_stars: int | None
    value_for_money_stars: int | None
    best_part: str | None


class ReviewListResponse(BaseModel):
    """Schema for the admin review list."""

    reviews: list[ReviewResponse]
