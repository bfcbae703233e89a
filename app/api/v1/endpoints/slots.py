"""Client-facing availability."""

from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.errors import NotFoundError
from app.models.service import Service
from app.schemas.post import BookableSlotOut
from app.services.posts import PostRegistry
from app.services.slots import SlotEngine
from app.utils.timeutils import parse_date

router = APIRouter()


@router.get("", response_model=list[BookableSlotOut])
async def get_available_slots(
    date: str = Query(..., description="YYYY-MM-DD"),
    post_id: Optional[str] = Query(None),
    service_id: Optional[UUID] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Slots of one post for one day, with a bookable flag per slot.

    ``post_id`` defaults to the fallback post. Each slot holds at most one
    booking, so ``remaining_capacity`` is 0 or 1.
    """
    day = parse_date(date)
    if service_id is not None and await db.get(Service, service_id) is None:
        raise NotFoundError("Service not found")

    post_id = post_id or settings.DEFAULT_POST_ID
    if post_id == settings.DEFAULT_POST_ID:
        await PostRegistry(db).ensure_default()

    slots = await SlotEngine(db).generate_slots(post_id, day)
    return [
        BookableSlotOut(
            time=slot.time,
            is_closed=slot.is_closed,
            is_available=not slot.is_closed,
            remaining_capacity=0 if slot.is_closed else 1,
        )
        for slot in slots
    ]
