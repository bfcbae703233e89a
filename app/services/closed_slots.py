"""Closed-slot overlay.

One set of blocked times-of-day per post, shared by every calendar day: a
bay closed at "13:00" is closed at 13:00 each day until reopened. Entries are
not checked against the post's working hours and are kept when the hours
change.
"""

import logging
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.post import Post, PostClosedSlot
from app.utils.timeutils import parse_time_of_day

logger = logging.getLogger(__name__)


class ClosedSlotOverlay:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def closed_times(self, post_id: str) -> set[str]:
        result = await self.db.execute(
            select(PostClosedSlot.time).where(PostClosedSlot.post_id == post_id)
        )
        return set(result.scalars().all())

    async def is_closed(self, post_id: str, time: str) -> bool:
        return parse_time_of_day(time) in await self.closed_times(post_id)

    async def set_closed(self, post_id: str, time: str, closed: bool) -> bool:
        """Close or reopen ``time`` for ``post_id``. Returns False if the post is unknown.

        Idempotent in both directions.
        """
        hhmm = parse_time_of_day(time)
        if await self.db.get(Post, post_id) is None:
            return False

        existing = await self.db.scalar(
            select(PostClosedSlot).where(
                PostClosedSlot.post_id == post_id,
                PostClosedSlot.time == hhmm,
            )
        )
        if closed and existing is None:
            self.db.add(PostClosedSlot(post_id=post_id, time=hhmm))
        elif not closed and existing is not None:
            await self.db.execute(
                delete(PostClosedSlot).where(PostClosedSlot.id == existing.id)
            )
        await self.db.commit()

        logger.info("Post %s slot %s %s", post_id, hhmm, "closed" if closed else "reopened")
        return True
