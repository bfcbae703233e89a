"""In-app notifications for clients.

Rows are added to the caller's session without committing, so they are
saved in the same transaction as the booking change that produced them.
"""

import logging
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.booking import Booking
from app.models.notification import Notification, NotificationType
from app.utils.timeutils import format_instant

logger = logging.getLogger(__name__)


def add_notification(
    db: AsyncSession,
    user_id: UUID,
    title: str,
    message: str,
    notification_type: NotificationType,
) -> Notification:
    """Stage a notification for a user on the current session."""
    notification = Notification(
        user_id=user_id,
        title=title,
        message=message,
        type=notification_type,
        is_read=False,
    )
    db.add(notification)

    logger.info(
        "Queued notification for user %s: %s (%s)",
        user_id,
        title,
        notification_type.value,
    )
    return notification


def add_booking_confirmed_notification(db: AsyncSession, booking: Booking) -> Notification:
    return add_notification(
        db=db,
        user_id=booking.user_id,
        title="Booking confirmed",
        message=f'Your booking for "{booking.service_name}" on {format_instant(booking.date_time)} is confirmed.',
        notification_type=NotificationType.SERVICE,
    )


def add_booking_completed_notification(db: AsyncSession, booking: Booking) -> Notification:
    return add_notification(
        db=db,
        user_id=booking.user_id,
        title="Service completed",
        message="Your car is ready. The administrator has confirmed the service is complete.",
        notification_type=NotificationType.SERVICE,
    )
