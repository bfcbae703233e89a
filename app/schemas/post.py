"""Pydantic schemas for posts, slots and the working-hours policy."""

from datetime import datetime
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field


class PostCreate(BaseModel):
    name: Optional[str] = None


class PostUpdate(BaseModel):
    """Partial patch; omitted fields keep their current value."""
    name: Optional[str] = None
    is_enabled: Optional[bool] = None
    use_custom_hours: Optional[bool] = None
    start_time: Optional[str] = None  # "08:00"
    end_time: Optional[str] = None  # "12:00"
    interval_minutes: Optional[int] = None  # 30 / 60 / 90 / 120


class PostOut(BaseModel):
    id: str
    name: str
    is_enabled: bool
    use_custom_hours: bool
    start_time: str
    end_time: str
    interval_minutes: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SlotOut(BaseModel):
    """One candidate slot of a post's day."""
    time: str  # ISO instant, "2026-03-01T09:00:00Z"
    is_closed: bool


class BookableSlotOut(SlotOut):
    """Client-facing slot with capacity flags."""
    is_available: bool
    remaining_capacity: int


class ClosedSlotUpdate(BaseModel):
    time: str  # "13:00"
    closed: bool


class ClosedSlotsOut(BaseModel):
    post_id: str
    times: list[str]


class WorkingHoursUpdate(BaseModel):
    start_hour: Optional[int] = Field(None, validation_alias=AliasChoices("start_hour", "start"))
    end_hour: Optional[int] = Field(None, validation_alias=AliasChoices("end_hour", "end"))
    slot_duration_minutes: Optional[int] = Field(
        None, validation_alias=AliasChoices("slot_duration_minutes", "slot_duration")
    )


class WorkingHoursOut(BaseModel):
    start_hour: int
    end_hour: int
    slot_duration_minutes: int
    start_time: str  # "09:00"
    end_time: str  # "18:00"
    # Short keys, same values as the hour/minute fields above
    start: int
    end: int
    slot_duration: int
