"""Global working-hours policy.

One row holds the default open/close hour and slot duration used by every
post without custom hours. Reads go to the database each time, so a change
is visible to the very next slot request.
"""

import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import ValidationError
from app.models.post import ALLOWED_INTERVALS
from app.models.working_hours import WorkingHours, POLICY_ROW_ID

logger = logging.getLogger(__name__)


def render_hour(hour: int) -> str:
    """Render a policy hour as ``HH:00``."""
    return f"{hour:02d}:00"


class WorkingHoursPolicy:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _row(self) -> WorkingHours:
        row = await self.db.get(WorkingHours, POLICY_ROW_ID)
        if row is None:
            row = WorkingHours(
                id=POLICY_ROW_ID,
                start_hour=settings.DEFAULT_START_HOUR,
                end_hour=settings.DEFAULT_END_HOUR,
                slot_duration_minutes=settings.DEFAULT_SLOT_DURATION_MINUTES,
            )
            self.db.add(row)
            await self.db.commit()
            logger.info(
                "Initialised working hours %s-%s", row.start_hour, row.end_hour
            )
        return row

    async def get(self) -> dict:
        row = await self._row()
        return {
            "start_hour": row.start_hour,
            "end_hour": row.end_hour,
            "slot_duration_minutes": row.slot_duration_minutes,
        }

    async def set(
        self,
        start_hour: Optional[int] = None,
        end_hour: Optional[int] = None,
        slot_duration_minutes: Optional[int] = None,
    ) -> dict:
        """Update any subset of the policy; omitted fields keep prior values."""
        row = await self._row()
        new_start = row.start_hour if start_hour is None else start_hour
        new_end = row.end_hour if end_hour is None else end_hour
        new_duration = row.slot_duration_minutes if slot_duration_minutes is None else slot_duration_minutes

        if not (0 <= new_start < new_end <= 24):
            raise ValidationError(
                f"Working hours must satisfy 0 <= start < end <= 24 (got start={new_start}, end={new_end})"
            )
        if new_duration not in ALLOWED_INTERVALS:
            raise ValidationError(
                f"slot_duration_minutes must be one of {', '.join(map(str, ALLOWED_INTERVALS))}"
            )

        row.start_hour = new_start
        row.end_hour = new_end
        row.slot_duration_minutes = new_duration
        await self.db.commit()

        logger.info("Working hours set to %s-%s (%s min)", new_start, new_end, new_duration)
        return await self.get()
