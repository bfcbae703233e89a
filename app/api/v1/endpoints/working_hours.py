"""Global working-hours policy endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import require_admin
from app.models.user import User
from app.schemas.post import WorkingHoursOut, WorkingHoursUpdate
from app.services.working_hours import WorkingHoursPolicy, render_hour

router = APIRouter()


def _to_out(policy: dict) -> WorkingHoursOut:
    return WorkingHoursOut(
        **policy,
        start_time=render_hour(policy["start_hour"]),
        end_time=render_hour(policy["end_hour"]),
        start=policy["start_hour"],
        end=policy["end_hour"],
        slot_duration=policy["slot_duration_minutes"],
    )


@router.get("", response_model=WorkingHoursOut)
async def get_working_hours(db: AsyncSession = Depends(get_db)):
    return _to_out(await WorkingHoursPolicy(db).get())


@router.put("", response_model=WorkingHoursOut)
async def update_working_hours(
    body: WorkingHoursUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Update any subset of start hour, end hour and slot duration."""
    policy = await WorkingHoursPolicy(db).set(
        start_hour=body.start_hour,
        end_hour=body.end_hour,
        slot_duration_minutes=body.slot_duration_minutes,
    )
    return _to_out(policy)
