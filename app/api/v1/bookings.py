"""White Lotus booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import (
    get_booking_service,
    get_db,
    get_optional_session,
    require_admin_session,
)
from app.core.exceptions import ValidationError
from app.core.security import SessionUser
from app.domain.field_approval import MISSING, is_true_flag, parse_field_action
from app.schemas.booking import (
    BookingCommentCreate,
    BookingCommentResponse,
    BookingCommentResult,
    BookingCommentReview,
    BookingDetailResponse,
    BookingFieldUpdate,
    BookingFieldUpdateResponse,
    BookingResponse,
    BookingStatusResponse,
)
from app.services.booking_service import BookingService

router = APIRouter()


@router.get("/{bookingref}", response_model=BookingDetailResponse)
async def get_booking(
    bookingref: str,
    session: Annotated[SessionUser | None, Depends(get_optional_session)],
    service: Annotated[BookingService, Depends(get_booking_service)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingDetailResponse:
    """Booking page data: the booking, its comments and the viewer's role."""
    booking = await service.get_by_reference(db, bookingref, case_insensitive=True)

    is_admin = bool(session and session.is_admin)
    is_owner = bool(
        session
        and session.email
        and booking.contact_email
        and session.email.lower() == booking.contact_email.lower()
    )
    comments = await service.list_comments(db, booking.id, include_internal=is_admin)

    return BookingDetailResponse(
        booking=BookingResponse.model_validate(booking),
        comments=[BookingCommentResponse.model_validate(c) for c in comments],
        is_admin=is_admin,
        is_owner=is_owner,
    )


@router.patch("/{bookingref}/field", response_model=BookingFieldUpdateResponse)
async def update_booking_field(
    bookingref: str,
    body: BookingFieldUpdate,
    session: Annotated[SessionUser | None, Depends(get_optional_session)],
    service: Annotated[BookingService, Depends(get_booking_service)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingFieldUpdateResponse:
    """Edit, approve or reject one field of the booking document.

    Customers (booking link or matching session email) leave the field
    pending approval; admins approve, reject or set it directly.
    """
    if not body.field:
        raise ValidationError("Field is required")

    action = parse_field_action(
        approve=body.approve,
        reject=body.reject,
        value=body.value if body.value_provided else MISSING,
    )

    outcome = await service.update_field(
        db,
        bookingref,
        body.field,
        action,
        session=session,
        notify_customer=is_true_flag(body.notify_customer),
    )
    return BookingFieldUpdateResponse(booking=BookingResponse.model_validate(outcome.booking))


@router.post("/{bookingref}/confirm", response_model=BookingStatusResponse)
async def confirm_booking(
    bookingref: str,
    admin: Annotated[SessionUser, Depends(require_admin_session)],
    service: Annotated[BookingService, Depends(get_booking_service)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingStatusResponse:
    """Confirm a pending booking."""
    booking = await service.change_status(db, bookingref, "confirmed")
    return BookingStatusResponse(booking=BookingResponse.model_validate(booking))


@router.post("/{bookingref}/cancel", response_model=BookingStatusResponse)
async def cancel_booking(
    bookingref: str,
    admin: Annotated[SessionUser, Depends(require_admin_session)],
    service: Annotated[BookingService, Depends(get_booking_service)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingStatusResponse:
    """Cancel a pending or confirmed booking."""
    booking = await service.change_status(db, bookingref, "cancelled")
    return BookingStatusResponse(booking=BookingResponse.model_validate(booking))


# ============ COMMENTS ============


@router.post("/{bookingref}/comment", response_model=BookingCommentResult)
async def add_booking_comment(
    bookingref: str,
    body: BookingCommentCreate,
    session: Annotated[SessionUser | None, Depends(get_optional_session)],
    service: Annotated[BookingService, Depends(get_booking_service)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingCommentResult:
    """Comment on a section of the booking."""
    comment, _ = await service.add_comment(
        db,
        bookingref,
        section=body.section,
        comment=body.comment,
        session=session,
        notify_customer=is_true_flag(body.notify_customer),
        is_internal=is_true_flag(body.is_internal),
    )
    return BookingCommentResult(comment=BookingCommentResponse.model_validate(comment))


@router.patch("/{bookingref}/comment/{comment_id}", response_model=BookingCommentResult)
async def review_booking_comment(
    bookingref: str,
    comment_id: UUID,
    body: BookingCommentReview,
    admin: Annotated[SessionUser, Depends(require_admin_session)],
    service: Annotated[BookingService, Depends(get_booking_service)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BookingCommentResult:
    """Accept or decline a customer comment."""
    comment = await service.review_comment(
        db,
        bookingref,
        comment_id,
        status=body.status,
        reviewer=admin,
        admin_response=body.admin_response,
    )
    return BookingCommentResult(comment=BookingCommentResponse.model_validate(comment))
