"""Admin panel endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_review_service, require_review_viewer
from app.core.security import SessionUser
from app.schemas.review import ReviewListResponse, ReviewResponse
from app.services.review_service import ReviewService

router = APIRouter()


# ============ REVIEWS ============


@router.get("/reviews", response_model=ReviewListResponse)
async def list_reviews(
    viewer: Annotated[SessionUser, Depends(require_review_viewer)],
    service: Annotated[ReviewService, Depends(get_review_service)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReviewListResponse:
    """Latest reviews, newest first."""
    reviews = await service.list_reviews(db)
    return ReviewListResponse(reviews=[ReviewResponse.model_validate(r) for r in reviews])
