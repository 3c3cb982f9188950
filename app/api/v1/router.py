"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import admin, bookings, reviews

api_router = APIRouter()

# Bookings
api_router.include_router(bookings.router, prefix="/wl/booking", tags=["Bookings"])

# Reviews
api_router.include_router(reviews.router, prefix="/wl/review", tags=["Reviews"])

# Admin
api_router.include_router(admin.router, prefix="/wl/admin", tags=["Admin"])
