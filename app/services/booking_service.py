"""White Lotus booking service: field approvals, status changes and comments."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthorizationError, NotFoundError, StorageError, ValidationError
from app.core.security import SessionUser
from app.domain.booking_state import assert_booking_transition
from app.domain.comment_state import assert_review_status, initial_comment_status
from app.domain.field_approval import (
    FieldAction,
    FieldTransition,
    apply_field_action,
    resolve_actor,
)
from app.models.booking import Booking, BookingComment
from app.services.notification_service import NotificationResult, NotificationService

logger = logging.getLogger(__name__)


@dataclass
class FieldUpdateOutcome:
    """Result of a field update: the stored booking plus what was emailed."""

    booking: Booking
    transition: FieldTransition
    notification: NotificationResult


class BookingService:
    """Service for White Lotus booking changes."""

    def __init__(self, notifier: NotificationService) -> None:
        self.notifier = notifier

    # ==================== LOOKUP ====================

    async def get_by_reference(
        self,
        db: AsyncSession,
        reference_id: str,
        case_insensitive: bool = False,
    ) -> Booking:
        """Fetch a booking by its public reference.

        Args:
            db: Database session
            reference_id: Reference from the booking link
            case_insensitive: Retry ignoring case when the exact match misses

        Raises:
            NotFoundError: If no booking matches
        """
        result = await db.execute(select(Booking).where(Booking.reference_id == reference_id))
        booking = result.scalar_one_or_none()

        if booking is None and case_insensitive:
            result = await db.execute(
                select(Booking).where(func.lower(Booking.reference_id) == reference_id.lower())
            )
            booking = result.scalars().first()

        if booking is None:
            logger.info(f"Booking not found for reference {reference_id}")
            raise NotFoundError("Booking", reference_id)
        return booking

    # ==================== FIELD APPROVALS ====================

    async def update_field(
        self,
        db: AsyncSession,
        reference_id: str,
        field: str,
        action: FieldAction,
        session: SessionUser | None,
        notify_customer: bool = False,
    ) -> FieldUpdateOutcome:
        """Apply a customer edit or an admin edit/approve/reject to one field.

        The whole ``booking_data`` document is rewritten; two concurrent
        updates of the same booking resolve as last writer wins.
        The change is committed before any email is sent.

        Args:
            db: Database session
            reference_id: Booking reference
            field: Dot path inside ``booking_data``
            action: Parsed action
            session: Signed-in user, or None for booking-link access
            notify_customer: Admin edit should be emailed to the customer

        Returns:
            FieldUpdateOutcome

        Raises:
            NotFoundError: Unknown booking
            AuthorizationError: Signed-in user is neither admin nor the contact
            ValidationError: A value was needed and not sent
            StorageError: The write failed
        """
        booking = await self.get_by_reference(db, reference_id)

        actor = resolve_actor(
            booking.contact_email,
            session_email=session.email if session else None,
            session_role=session.role if session else None,
        )
        transition = apply_field_action(booking.booking_data, field, actor, action)

        booking.booking_data = transition.document
        await self._commit(db, booking, "Failed to update booking")
        logger.info(
            f"Booking {booking.reference_id}: {actor.role.value} set {field} "
            f"({transition.base_field}: {transition.previous.status.value} -> "
            f"{transition.approval.status.value})"
        )

        notification = await self.notifier.notify_field_change(
            booking, transition, notify_customer=notify_customer
        )
        return FieldUpdateOutcome(booking=booking, transition=transition, notification=notification)

    # ==================== STATUS ====================

    async def change_status(self, db: AsyncSession, reference_id: str, target: str) -> Booking:
        """Move a booking to ``target`` status (confirmed or cancelled)."""
        booking = await self.get_by_reference(db, reference_id)
        assert_booking_transition(booking.status, target)

        booking.status = target
        await self._commit(db, booking, f"Failed to mark booking {target}")
        logger.info(f"Booking {booking.reference_id} is now {target}")
        return booking

    # ==================== COMMENTS ====================

    async def list_comments(
        self,
        db: AsyncSession,
        booking_id: UUID,
        include_internal: bool = False,
    ) -> list[BookingComment]:
        """Comments on a booking, newest first."""
        query = select(BookingComment).where(BookingComment.booking_id == booking_id)
        if not include_internal:
            query = query.where(BookingComment.is_internal.is_(False))
        result = await db.execute(query.order_by(BookingComment.created_at.desc()))
        return list(result.scalars().all())

    async def add_comment(
        self,
        db: AsyncSession,
        reference_id: str,
        section: str | None,
        comment: str | None,
        session: SessionUser | None,
        notify_customer: bool = False,
        is_internal: bool = False,
    ) -> tuple[BookingComment, NotificationResult]:
        """Post a comment on a booking section.

        Admin comments are accepted straight away and may be internal notes;
        customer comments wait for review.
        """
        if not section or not comment or not comment.strip():
            raise ValidationError("Section and comment are required")

        booking = await self.get_by_reference(db, reference_id)
        actor = resolve_actor(
            booking.contact_email,
            session_email=session.email if session else None,
            session_role=session.role if session else None,
        )
        internal_note = bool(is_internal) and actor.is_admin

        new_comment = BookingComment(
            booking_id=booking.id,
            section=section,
            comment=comment.strip(),
            status=initial_comment_status(actor.is_admin),
            created_by_email=actor.email,
            is_internal=internal_note,
        )
        db.add(new_comment)
        await self._commit(db, new_comment, "Failed to create comment")

        notification = await self.notifier.notify_comment(
            booking,
            section=section,
            comment=new_comment.comment,
            author_email=actor.email,
            author_is_admin=actor.is_admin,
            notify_customer=notify_customer,
            is_internal=internal_note,
        )
        return new_comment, notification

    async def review_comment(
        self,
        db: AsyncSession,
        reference_id: str,
        comment_id: UUID,
        status: str | None,
        reviewer: SessionUser,
        admin_response: str | None = None,
    ) -> BookingComment:
        """Accept or decline a comment (admin only)."""
        status = assert_review_status(status)
        if not reviewer.is_admin or not reviewer.email:
            raise AuthorizationError("Admin access required")

        booking = await self.get_by_reference(db, reference_id)
        result = await db.execute(
            select(BookingComment).where(
                BookingComment.id == comment_id,
                BookingComment.booking_id == booking.id,
            )
        )
        comment = result.scalar_one_or_none()
        if comment is None:
            raise NotFoundError("Comment", str(comment_id))

        comment.status = status
        comment.reviewed_by = reviewer.email
        comment.reviewed_at = datetime.now(UTC)
        if admin_response and admin_response.strip():
            comment.admin_response = admin_response.strip()

        await self._commit(db, comment, "Failed to update comment")
        return comment

    # ==================== HELPERS ====================

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
