"""Slot availability engine.

Slots are computed on every request from the working-hours policy, the
post's own settings, the closed-slot overlay and the live bookings on the
post. Nothing here is persisted, and nothing here writes bookings.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.booking import Booking, BookingStatus
from app.models.post import Post
from app.services.closed_slots import ClosedSlotOverlay
from app.services.working_hours import WorkingHoursPolicy
from app.utils.timeutils import (
    combine_utc,
    format_instant,
    hhmm_to_minutes,
    minutes_to_hhmm,
    slot_minutes,
    utcnow,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Slot:
    start: datetime  # naive UTC
    is_closed: bool

    @property
    def time(self) -> str:
        return format_instant(self.start)

    @property
    def time_of_day(self) -> str:
        return self.start.strftime("%H:%M")

    def as_dict(self) -> dict:
        return {"time": self.time, "is_closed": self.is_closed}


class SlotEngine:
    def __init__(self, db: AsyncSession, now: Callable[[], datetime] = utcnow):
        self.db = db
        self.now = now
        self.policy = WorkingHoursPolicy(db)
        self.overlay = ClosedSlotOverlay(db)

    async def effective_hours(self, post: Post) -> tuple[int, int]:
        """(start, end) of the post's day in minutes since midnight."""
        if post.use_custom_hours:
            return (
                hhmm_to_minutes(post.start_time),
                hhmm_to_minutes(post.end_time, allow_end_of_day=True),
            )
        policy = await self.policy.get()
        return policy["start_hour"] * 60, policy["end_hour"] * 60

    async def _booked_starts(self, post_id: str, day: date) -> set[datetime]:
        day_start = combine_utc(day, 0)
        result = await self.db.execute(
            select(Booking.date_time).where(
                Booking.post_id == post_id,
                Booking.status != BookingStatus.CANCELLED,
                Booking.date_time >= day_start,
                Booking.date_time < day_start + timedelta(days=1),
            )
        )
        return set(result.scalars().all())

    async def generate_slots(self, post_id: str, day: date) -> list[Slot]:
        """Candidate slots of ``day`` for ``post_id`` in chronological order.

        A slot is closed when the post is disabled, its time-of-day is in
        the overlay, a non-cancelled booking already starts at that exact
        instant on this post, or the instant is already in the past. An
        unknown post yields an empty list.
        """
        post = await self.db.get(Post, post_id)
        if post is None:
            return []

        start, end = await self.effective_hours(post)
        closed_times = await self.overlay.closed_times(post_id)
        booked = await self._booked_starts(post_id, day)
        now = self.now()

        slots = []
        for minutes in slot_minutes(start, end, post.interval_minutes):
            instant = combine_utc(day, minutes)
            is_closed = (
                not post.is_enabled
                or minutes_to_hhmm(minutes) in closed_times
                or instant in booked
                or instant < now
            )
            slots.append(Slot(start=instant, is_closed=is_closed))
        return slots

    async def is_open(self, post_id: str, instant: datetime) -> bool:
        """True if ``instant`` is one of the post's open slot starts."""
        for slot in await self.generate_slots(post_id, instant.date()):
            if slot.start == instant:
                return not slot.is_closed
        return False
