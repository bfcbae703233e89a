"""Booking lifecycle manager.

Owns booking records: validates the requested post/slot on creation,
enforces the status state machine and raises lifecycle events for the
notifier. Reads posts, policy and overlay through the scheduling services
but never writes them (apart from provisioning the default post).
"""

import logging
import math
from collections.abc import Callable
from datetime import datetime
from typing import Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.locks import booking_locks, slot_locks
from app.models.booking import (
    ALLOWED_TRANSITIONS,
    Booking,
    BookingStatus,
    BookingTerms,
    ControlStatus,
)
from app.models.employee import Employee
from app.models.service import Service
from app.models.user import User
from app.services.booking_notifier import BookingEvent, BookingNotifier
from app.services.notification_service import (
    add_booking_completed_notification,
    add_booking_confirmed_notification,
)
from app.services.posts import PostRegistry
from app.services.slots import SlotEngine
from app.utils.timeutils import format_instant, parse_instant, utcnow

logger = logging.getLogger(__name__)

STATUS_EVENTS = {
    BookingStatus.CONFIRMED: BookingEvent.CONFIRMED,
    BookingStatus.CANCELLED: BookingEvent.CANCELLED,
    BookingStatus.IN_PROGRESS: BookingEvent.IN_PROGRESS,
    BookingStatus.COMPLETED: BookingEvent.COMPLETED,
}


def _valid_values(enum_cls) -> str:
    return ", ".join(member.value for member in enum_cls)


class BookingManager:
    def __init__(
        self,
        db: AsyncSession,
        notifier: Optional[BookingNotifier] = None,
        now: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.notifier = notifier or BookingNotifier()
        self.now = now
        self.posts = PostRegistry(db)
        self.slots = SlotEngine(db, now=now)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get(self, booking_id: UUID) -> Booking:
        booking = await self.db.get(Booking, booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    async def list_bookings(self, user_id: Optional[UUID] = None) -> list[Booking]:
        """Newest first; restricted to one client when ``user_id`` is given."""
        query = select(Booking).order_by(Booking.created_at.desc())
        if user_id is not None:
            query = query.where(Booking.user_id == user_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _get_for_update(self, booking_id: UUID) -> Booking:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.id == booking_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        booking = result.scalar_one_or_none()
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create(
        self,
        service_id: UUID,
        date_time: str,
        user: User,
        post_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Booking:
        """Create a pending booking on an open slot.

        Raises ValidationError for a malformed instant, NotFoundError for an
        unknown service or post and ConflictError when the post is disabled
        or the slot is closed, past or already taken.
        """
        instant = parse_instant(date_time)

        service = await self.db.get(Service, service_id)
        if service is None:
            raise NotFoundError("Service not found")

        post_id = post_id or settings.DEFAULT_POST_ID
        if post_id == settings.DEFAULT_POST_ID:
            await self.posts.ensure_default()
        post = await self.posts.get(post_id)
        if post is None:
            raise NotFoundError("Post not found")
        if not post.is_enabled:
            raise ConflictError("Post is disabled")

        async with slot_locks.hold((post_id, instant)):
            if not await self.slots.is_open(post_id, instant):
                raise ConflictError(
                    f"Slot {format_instant(instant)} on post {post_id} is not available"
                )

            booking = Booking(
                created_at=self.now(),
                service_id=service.id,
                user_id=user.id,
                post_id=post_id,
                terms=BookingTerms(
                    service_name=service.name,
                    user_name=user.full_name,
                    price=service.price,
                    duration=service.duration,
                ),
                date_time=instant,
                status=BookingStatus.PENDING,
                control_status=ControlStatus.PENDING,
                notes=(notes or "").strip() or None,
            )
            self.db.add(booking)
            try:
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                raise ConflictError(
                    f"Slot {format_instant(instant)} on post {post_id} was just booked"
                )

        logger.info(
            "Created booking %s: %s for %s at %s on %s",
            booking.id,
            booking.service_name,
            booking.user_name,
            format_instant(instant),
            post_id,
        )
        await self._emit(BookingEvent.NEW_BOOKING, booking)
        return booking

    # ------------------------------------------------------------------
    # Status state machine
    # ------------------------------------------------------------------

    async def set_status(self, booking_id: UUID, status: str) -> Booking:
        try:
            new_status = BookingStatus(status)
        except ValueError:
            raise ValidationError(f"Invalid status. Valid statuses: {_valid_values(BookingStatus)}")

        async with booking_locks.hold(booking_id):
            booking = await self._get_for_update(booking_id)
            current = booking.status
            if new_status not in ALLOWED_TRANSITIONS[current]:
                raise ValidationError(
                    f"Cannot change status from {current.value} to {new_status.value}"
                )

            booking.status = new_status
            if new_status == BookingStatus.IN_PROGRESS:
                booking.in_progress_started_at = self.now()
            if booking.user_id is not None:
                if new_status == BookingStatus.CONFIRMED:
                    add_booking_confirmed_notification(self.db, booking)
                elif new_status == BookingStatus.COMPLETED:
                    add_booking_completed_notification(self.db, booking)
            await self.db.commit()

        logger.info("Booking %s: %s -> %s", booking_id, current.value, new_status.value)

        client = await self.db.get(User, booking.user_id) if booking.user_id else None
        await self._emit(STATUS_EVENTS[new_status], booking, client)
        return booking

    # ------------------------------------------------------------------
    # Administrative edits
    # ------------------------------------------------------------------

    async def update_control(
        self,
        booking_id: UUID,
        status: Optional[str] = None,
        comment: Optional[str] = None,
        comment_given: bool = False,
    ) -> Booking:
        """Update the follow-up tag and/or comment; ``status`` stays untouched."""
        if status is None and not comment_given:
            raise ValidationError("Provide status and/or comment")
        control_status = None
        if status is not None:
            try:
                control_status = ControlStatus(status)
            except ValueError:
                raise ValidationError(f"Invalid status. Valid: {_valid_values(ControlStatus)}")

        async with booking_locks.hold(booking_id):
            booking = await self._get_for_update(booking_id)
            if control_status is not None:
                booking.control_status = control_status
            if comment_given:
                booking.control_comment = (comment or "").strip() or None
            booking.control_updated_at = self.now()
            await self.db.commit()
        return booking

    async def assign_employee(self, booking_id: UUID, employee_id: Optional[UUID]) -> Booking:
        booking = await self.get(booking_id)
        if employee_id is None:
            booking.employee_id = None
            booking.employee_name = None
        else:
            employee = await self.db.get(Employee, employee_id)
            if employee is None:
                raise NotFoundError("Employee not found")
            booking.employee_id = employee.id
            booking.employee_name = employee.name
        await self.db.commit()
        return booking

    async def rate(self, booking_id: UUID, rating: float, comment: Optional[str] = None) -> Booking:
        if not math.isfinite(rating):
            raise ValidationError("Rating must be a number between 1 and 5")
        booking = await self.get(booking_id)
        # half up: 2.5 -> 3, 4.5 -> 5
        booking.rating = min(5, max(1, math.floor(rating + 0.5)))
        booking.rating_comment = (comment or "").strip() or None
        await self.db.commit()
        return booking

    async def delete(self, booking_id: UUID) -> bool:
        """Hard delete. Cancelling is the normal way to release a slot."""
        booking = await self.db.get(Booking, booking_id)
        if booking is None:
            return False
        await self.db.delete(booking)
        await self.db.commit()
        logger.info("Deleted booking %s", booking_id)
        return True

    async def _emit(self, event: BookingEvent, booking: Booking, client: Optional[User] = None) -> None:
        try:
            await self.notifier.notify(event, booking, client)
        except Exception:
            logger.exception("Dispatching %s for booking %s failed", event.value, booking.id)
