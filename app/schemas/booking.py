"""Booking-related Pydantic schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class BookingFieldUpdate(BaseModel):
    """Body of ``PATCH /wl/booking/{bookingref}/field``.

    All keys are optional here; missing data is reported by the field approval
    rules. Whether ``value`` was sent at all is read from ``model_fields_set``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    field: str | None = None
    value: Any = None
    notify_customer: Any = Field(
        default=None, validation_alias=AliasChoices("notifyCustomer", "notify_customer")
    )
    approve: Any = None
    reject: Any = None

    @property
    def value_provided(self) -> bool:
        return "value" in self.model_fields_set


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    reference_id: str
    contact_name: str | None
    contact_email: str
    contact_phone: str | None
    status: str
    language: str | None
    booking_data: dict[str, Any] | None
    created_at: datetime | None
    updated_at: datetime | None


class BookingFieldUpdateResponse(BaseModel):
    """Result of a field update."""

    success: bool = True
    booking: BookingResponse


class BookingStatusResponse(BaseModel):
    """Result of confirm / cancel."""

    success: bool = True
    booking: BookingResponse


class BookingCommentCreate(BaseModel):
    """Schema for posting a booking comment."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    section: str | None = None
    comment: str | None = None
    notify_customer: Any = Field(
        default=None, validation_alias=AliasChoices("notifyCustomer", "notify_customer")
    )
    is_internal: Any = Field(
        default=None, validation_alias=AliasChoices("isInternal", "is_internal")
    )


class BookingCommentReview(BaseModel):
    """Schema for accepting or declining a comment."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    status: str | None = None
    admin_response: str | None = Field(
        default=None, validation_alias=AliasChoices("adminResponse", "admin_response")
    )


class BookingCommentResponse(BaseModel):
    """Schema for comment response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_id: UUID
    section: str
    comment: str
    status: str
    created_by_email: str | None
    is_internal: bool
    admin_response: str | None
    reviewed_by: str | None
    reviewed_at: datetime | None
    created_at: datetime | None


class BookingCommentResult(BaseModel):
    """Result of a comment create / review."""

    success: bool = True
    comment: BookingCommentResponse


class BookingDetailResponse(BaseModel):
    """Booking page payload."""

    booking: BookingResponse
    comments: list[BookingCommentResponse] = []
    is_admin: bool = False
    is_owner: bool = False
