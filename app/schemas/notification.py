"""Schemas for the client's in-app booking feed."""

from datetime import datetime
from uuid import UUID
from pydantic import BaseModel

from app.models.notification import NotificationType


class NotificationOut(BaseModel):
    """One feed entry, e.g. "Booking confirmed" or "Your car is ready".

    Entries are written when an admin confirms or completes a booking and
    are never edited afterwards, apart from ``is_read``.
    """
    id: UUID
    user_id: UUID
    title: str
    message: str
    type: NotificationType  # "service" for booking updates
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationList(BaseModel):
    """A page of the feed, newest first. ``total`` counts every entry of the client."""
    notifications: list[NotificationOut]
    total: int
    page: int
    page_size: int


class NotificationUnreadCount(BaseModel):
    # Badge on the client's bookings screen
    count: int
