"""Post (service bay) management, closed slots and per-post slot listing."""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import require_admin
from app.core.errors import NotFoundError
from app.models.user import User
from app.schemas.post import (
    ClosedSlotsOut,
    ClosedSlotUpdate,
    PostCreate,
    PostOut,
    PostUpdate,
    SlotOut,
)
from app.services.closed_slots import ClosedSlotOverlay
from app.services.posts import PostRegistry
from app.services.slots import SlotEngine
from app.utils.timeutils import parse_date

router = APIRouter()
logger = logging.getLogger(__name__)


# ============================================================================
# POSTS
# ============================================================================

@router.get("", response_model=list[PostOut])
async def list_posts(db: AsyncSession = Depends(get_db)):
    """All posts, the default one included."""
    return await PostRegistry(db).list_posts()


@router.post("", response_model=PostOut, status_code=201)
async def create_post(
    body: PostCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return await PostRegistry(db).create(body.name)


@router.patch("/{post_id}", response_model=PostOut)
async def update_post(
    post_id: str,
    body: PostUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return await PostRegistry(db).update(post_id, body.model_dump(exclude_unset=True))


@router.delete("/{post_id}", status_code=204)
async def delete_post(
    post_id: str,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    if not await PostRegistry(db).delete(post_id):
        raise HTTPException(status_code=404, detail="Post not found")


# ============================================================================
# SLOTS
# ============================================================================

@router.get("/{post_id}/slots", response_model=list[SlotOut])
async def get_post_slots(
    post_id: str,
    date: str = Query(..., description="YYYY-MM-DD"),
    db: AsyncSession = Depends(get_db),
):
    """Every candidate slot of the day, closed ones included."""
    slots = await SlotEngine(db).generate_slots(post_id, parse_date(date))
    return [slot.as_dict() for slot in slots]


# ============================================================================
# CLOSED SLOTS
# ============================================================================

@router.get("/{post_id}/closed-slots", response_model=ClosedSlotsOut)
async def get_closed_slots(post_id: str, db: AsyncSession = Depends(get_db)):
    if await PostRegistry(db).get(post_id) is None:
        raise NotFoundError("Post not found")
    times = await ClosedSlotOverlay(db).closed_times(post_id)
    return ClosedSlotsOut(post_id=post_id, times=sorted(times))


@router.put("/{post_id}/closed-slots", response_model=ClosedSlotsOut)
async def set_closed_slot(
    post_id: str,
    body: ClosedSlotUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Close or reopen one time-of-day on the post, for every date."""
    overlay = ClosedSlotOverlay(db)
    if not await overlay.set_closed(post_id, body.time, body.closed):
        raise NotFoundError("Post not found")
    return ClosedSlotsOut(post_id=post_id, times=sorted(await overlay.closed_times(post_id)))
