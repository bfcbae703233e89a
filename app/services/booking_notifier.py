"""Booking lifecycle notifications.

``BookingNotifier.notify`` fans an event out to the admin Telegram chats,
admin email addresses and the client (Telegram chat and SMS). Delivery is
best-effort: every failure is logged and dropped so the state change that
triggered it is never affected.
"""

import enum
import html
import logging
from typing import Optional
from fastapi import BackgroundTasks

from app.core.config import settings
from app.models.booking import Booking
from app.models.user import User
from app.services import sms, telegram
from app.services.email_service import email_service
from app.utils.timeutils import format_instant

logger = logging.getLogger(__name__)


class BookingEvent(str, enum.Enum):
    NEW_BOOKING = "new_booking"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


ADMIN_TITLES = {
    BookingEvent.NEW_BOOKING: "🆕 <b>New booking</b>",
    BookingEvent.CONFIRMED: "✅ <b>Booking confirmed</b>",
    BookingEvent.CANCELLED: "❌ <b>Booking cancelled</b>",
}

CLIENT_MESSAGES = {
    BookingEvent.CONFIRMED: "Your booking for {service} on {when} is confirmed.",
    BookingEvent.CANCELLED: "Your booking for {service} on {when} has been cancelled.",
    BookingEvent.IN_PROGRESS: "We have started working on your {service}.",
    BookingEvent.COMPLETED: "Your {service} is done. Your car is ready!",
}


def _admin_flag(event: BookingEvent) -> bool:
    """Per-event switch for admin Telegram alerts."""
    if event == BookingEvent.NEW_BOOKING:
        return settings.TELEGRAM_NOTIFY_NEW_BOOKING
    if event == BookingEvent.CONFIRMED:
        return settings.TELEGRAM_NOTIFY_BOOKING_CONFIRMED
    if event == BookingEvent.CANCELLED:
        return settings.TELEGRAM_NOTIFY_BOOKING_CANCELLED
    return False


def format_admin_message(event: BookingEvent, booking: Booking) -> list[str]:
    """Admin alert lines in Telegram HTML; user supplied text is escaped."""
    lines = [
        ADMIN_TITLES[event],
        "",
        f"👤 {html.escape(booking.user_name, quote=False)}",
        f"📋 {html.escape(booking.service_name, quote=False)}",
        f"📅 {format_instant(booking.date_time)} (post {booking.post_id})",
    ]
    if event == BookingEvent.NEW_BOOKING:
        lines.append(f"💰 {booking.price}")
        if booking.notes:
            lines.append(f"📝 {html.escape(booking.notes, quote=False)}")
    return lines


def format_client_message(event: BookingEvent, booking: Booking) -> str:
    """Plain text, shared by SMS and Telegram."""
    return CLIENT_MESSAGES[event].format(
        service=booking.service_name,
        when=format_instant(booking.date_time),
    )


class BookingNotifier:
    async def notify(
        self,
        event: BookingEvent,
        booking: Booking,
        client: Optional[User] = None,
    ) -> None:
        """Deliver ``event`` for ``booking``. Never raises."""
        try:
            if event in ADMIN_TITLES:
                await self._notify_admins(event, booking)
            if event in CLIENT_MESSAGES and client is not None:
                await self._notify_client(event, booking, client)
        except Exception:
            logger.exception("Notification %s for booking %s failed", event.value, booking.id)

    async def _notify_admins(self, event: BookingEvent, booking: Booking) -> None:
        if event == BookingEvent.NEW_BOOKING and not settings.NOTIFICATIONS_ENABLED:
            logger.debug("Notifications disabled — skipping new booking alert for %s", booking.id)
            return

        lines = format_admin_message(event, booking)

        if _admin_flag(event) and settings.TELEGRAM_BOT_TOKEN:
            text = "\n".join(lines)
            for chat_id in settings.telegram_admin_chat_ids:
                await telegram.send_telegram_message(settings.TELEGRAM_BOT_TOKEN, chat_id, text)

        if settings.admin_emails:
            subject = f"{event.value.replace('_', ' ').capitalize()}: {booking.service_name}"
            plain_lines = [line.replace("<b>", "").replace("</b>", "") for line in lines if line]
            await email_service.send_booking_alert(settings.admin_emails, subject, plain_lines)

    async def _notify_client(self, event: BookingEvent, booking: Booking, client: User) -> None:
        text = format_client_message(event, booking)
        if client.telegram_chat_id and settings.TELEGRAM_BOT_TOKEN:
            await telegram.send_telegram_message(
                settings.TELEGRAM_BOT_TOKEN, client.telegram_chat_id, html.escape(text, quote=False)
            )
        await sms.send_booking_sms(client.phone, text)


def get_notifier() -> BookingNotifier:
    return BookingNotifier()


class DeferredNotifier:
    """Queues notifications as FastAPI background tasks.

    Delivery then runs after the response is sent, so a slow Telegram or
    Twilio call never holds up the request that changed the booking.
    """

    def __init__(self, background_tasks: BackgroundTasks, notifier: BookingNotifier):
        self.background_tasks = background_tasks
        self.notifier = notifier

    async def notify(
        self,
        event: BookingEvent,
        booking: Booking,
        client: Optional[User] = None,
    ) -> None:
        self.background_tasks.add_task(self.notifier.notify, event, booking, client)
