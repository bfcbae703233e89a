"""Pydantic schemas for bookings."""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import AliasChoices, BaseModel, Field, field_serializer
from app.models.booking import BookingStatus, ControlStatus
from app.utils.timeutils import format_instant


class BookingCreate(BaseModel):
    """Booking request. camelCase keys sent by the mobile client are accepted too."""
    service_id: UUID = Field(validation_alias=AliasChoices("service_id", "serviceId"))
    date_time: str = Field(validation_alias=AliasChoices("date_time", "dateTime", "start_iso", "startIso", "slot"))
    post_id: Optional[str] = Field(None, validation_alias=AliasChoices("post_id", "postId"))
    notes: Optional[str] = None
    # Only honoured for admins booking on behalf of a client
    user_id: Optional[UUID] = Field(None, validation_alias=AliasChoices("user_id", "userId"))


class BookingStatusUpdate(BaseModel):
    # Plain string so unknown values get a domain validation error, not a 422
    status: str


class BookingControlUpdate(BaseModel):
    status: Optional[str] = None
    comment: Optional[str] = None


class BookingEmployeeAssign(BaseModel):
    employee_id: Optional[UUID]


class BookingRatingIn(BaseModel):
    rating: float = Field(allow_inf_nan=False)
    comment: Optional[str] = None


class ClientBookingOut(BaseModel):
    """Booking as shown to the client who made it."""
    id: UUID
    service_id: Optional[UUID] = None
    service_name: str
    user_id: Optional[UUID] = None
    user_name: str
    post_id: str
    employee_id: Optional[UUID] = None
    employee_name: Optional[str] = None
    date_time: datetime
    status: BookingStatus
    price: int
    duration: int
    notes: Optional[str] = None
    in_progress_started_at: Optional[datetime] = None
    rating: Optional[int] = None
    rating_comment: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

    @field_serializer("date_time", "in_progress_started_at", "created_at")
    def render_instant(self, value: Optional[datetime]) -> Optional[str]:
        return format_instant(value) if value else None


class BookingOut(ClientBookingOut):
    """Full booking, including the administrative follow-up fields."""
    control_status: ControlStatus
    control_comment: Optional[str] = None
    control_updated_at: Optional[datetime] = None
