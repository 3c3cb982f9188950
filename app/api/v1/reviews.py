"""Event feedback (review) endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, BackgroundTasks, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_review_service
from app.core.exceptions import ValidationError
from app.schemas.review import ReviewCreate, ReviewCreateResponse, ReviewUpdateResponse
from app.services.notification_service import NotificationService, get_notification_service
from app.services.review_service import ReviewService

router = APIRouter()


@router.post("", response_model=ReviewCreateResponse)
async def submit_review(
    review_data: ReviewCreate,
    background_tasks: BackgroundTasks,
    service: Annotated[ReviewService, Depends(get_review_service)],
    notifier: Annotated[NotificationService, Depends(get_notification_service)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReviewCreateResponse:
    """Store a review and classify it as low, middle or high."""
    review = await service.submit_review(db, review_data)

    background_tasks.add_task(notifier.notify_review, service.notification_payload(review))
    return ReviewCreateResponse(id=review.id, segment=review.segment)


@router.patch("", response_model=ReviewUpdateResponse)
async def update_review(
    background_tasks: BackgroundTasks,
    service: Annotated[ReviewService, Depends(get_review_service)],
    notifier: Annotated[NotificationService, Depends(get_notification_service)],
    db: Annotated[AsyncSession, Depends(get_db)],
    body: Annotated[Any, Body()] = None,
) -> ReviewUpdateResponse:
    """Add follow-up answers to an existing review."""
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")

    review = await service.update_review(db, body.get("id"), body)

    background_tasks.add_task(
        notifier.notify_review, service.notification_payload(review), updated=True
    )
    return ReviewUpdateResponse(id=review.id)
