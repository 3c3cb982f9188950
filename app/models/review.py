"""Event feedback (review) database model."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.database import Base


class EventFeedback(Base):
    """Post-event review left by a White Lotus host."""

    __tablename__ = "whitelotus_event_feedback"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    locale: Mapped[str] = mapped_column(String(5), default="en")  # en, is

    # Headline scores
    overall_stars: Mapped[int] = mapped_column(Integer, nullable=False)  # 1-5
    recommend_score: Mapped[int] = mapped_column(Integer, nullable=False)  # 0-10
    segment: Mapped[str] = mapped_column(String(10), nullable=False)  # low, middle, high

    # Sub-ratings (1-5)
    booking_communication_stars: Mapped[int | None] = mapped_column(Integer)
    staff_service_stars: Mapped[int | None] = mapped_column(Integer)
    space_cleanliness_stars: Mapped[int | None] = mapped_column(Integer)
    improve_one_thing: Mapped[str | None] = mapped_column(Text)

    # Added later through the follow-up form
    testimonial_ok: Mapped[bool | None] = mapped_column(Boolean)
    testimonial_name: Mapped[str | None] = mapped_column(Text)
    testimonial_company: Mapped[str | None] = mapped_column(Text)
    low_satisfaction_details: Mapped[str | None] = mapped_column(Text)
    follow_up_ok: Mapped[bool | None] = mapped_column(Boolean)
    follow_up_name: Mapped[str | None] = mapped_column(Text)
    follow_up_contact: Mapped[str | None] = mapped_column(Text)
    ambience_vibe_stars: Mapped[int | None] = mapped_column(Integer)
    tech_equipment_stars: Mapped[int | None] = mapped_column(Integer)
    flow_on_the_day_stars: Mapped[int | None] = mapped_column(Integer)
    value_for_money_stars: Mapped[int | None] = mapped_column(Integer)
    best_part: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
