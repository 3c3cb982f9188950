"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-01-20

Creates the White Lotus tables:
- Bookings and booking comments
- Event feedback (reviews)
"""

from typing import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== BOOKINGS ====================
    op.create_table(
        "whitelotus_bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("reference_id", sa.String(100), unique=True, nullable=False, index=True),
        sa.Column("contact_name", sa.String(255)),
        sa.Column("contact_email", sa.String(255), nullable=False, index=True),
        sa.Column("contact_phone", sa.String(50)),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("language", sa.String(5), server_default="is"),
        sa.Column("booking_data", postgresql.JSONB, server_default=sa.text("'{}'::jsonb")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now()),
    )

    op.create_table(
        "whitelotus_booking_comments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("whitelotus_bookings.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("section", sa.String(50), nullable=False),
        sa.Column("comment", sa.Text, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("created_by_email", sa.String(255)),
        sa.Column("is_internal", sa.Boolean, server_default=sa.false()),
        sa.Column("admin_response", sa.Text),
        sa.Column("reviewed_by", sa.String(255)),
        sa.Column("reviewed_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ==================== REVIEWS ====================
    op.create_table(
        "whitelotus_event_feedback",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("locale", sa.String(5), server_default="en"),
        sa.Column("overall_stars", sa.Integer, nullable=False),
        sa.Column("recommend_score", sa.Integer, nullable=False),
        sa.Column("segment", sa.String(10), nullable=False, index=True),
        sa.Column("booking_communication_stars", sa.Integer),
        sa.Column("staff_service_stars", sa.Integer),
        sa.Column("space_cleanliness_stars", sa.Integer),
        sa.Column("improve_one_thing", sa.Text),
        sa.Column("testimonial_ok", sa.Boolean),
        sa.Column("testimonial_name", sa.Text),
        sa.Column("testimonial_company", sa.Text),
        sa.Column("low_satisfaction_details", sa.Text),
        sa.Column("follow_up_ok", sa.Boolean),
        sa.Column("follow_up_name", sa.Text),
        sa.Column("follow_up_contact", sa.Text),
        sa.Column("ambience_vibe_stars", sa.Integer),
        sa.Column("tech_equipment_stars", sa.Integer),
        sa.Column("flow_on_the_day_stars", sa.Integer),
        sa.Column("value_for_money_stars", sa.Integer),
        sa.Column("best_part", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now()),
    )


def downgrade() -> None:
    """Drop all database tables in reverse order."""
    op.drop_table("whitelotus_event_feedback")
    op.drop_table("whitelotus_booking_comments")
    op.drop_table("whitelotus_bookings")
