"""Post registry: the set of service bays bookings are assigned to."""

import logging
import uuid
from typing import Optional
from sqlalchemy import select, func, delete as sa_delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import NotFoundError, ValidationError
from app.models.post import Post, PostClosedSlot, ALLOWED_INTERVALS
from app.utils.timeutils import hhmm_to_minutes, minutes_to_hhmm

logger = logging.getLogger(__name__)

DEFAULT_START_TIME = "09:00"
DEFAULT_END_TIME = "18:00"
DEFAULT_INTERVAL = 30


def generate_post_id() -> str:
    return f"post_{uuid.uuid4().hex[:8]}"


class PostRegistry:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def ensure_default(self) -> Post:
        """Create the fallback post if it does not exist yet."""
        post = await self.db.get(Post, settings.DEFAULT_POST_ID)
        if post is not None:
            return post
        post = Post(
            id=settings.DEFAULT_POST_ID,
            name="Post 1",
            is_enabled=True,
            use_custom_hours=False,
            start_time=DEFAULT_START_TIME,
            end_time=DEFAULT_END_TIME,
            interval_minutes=DEFAULT_INTERVAL,
        )
        self.db.add(post)
        await self.db.commit()
        logger.info("Provisioned default post %s", post.id)
        return post

    async def get(self, post_id: str) -> Optional[Post]:
        return await self.db.get(Post, post_id)

    async def list_posts(self) -> list[Post]:
        await self.ensure_default()
        result = await self.db.execute(select(Post).order_by(Post.id))
        return list(result.scalars().all())

    async def create(self, name: Optional[str] = None) -> Post:
        name = (name or "").strip()
        if not name:
            count = await self.db.scalar(select(func.count(Post.id)))
            name = f"Post {(count or 0) + 1}"

        post = Post(
            id=generate_post_id(),
            name=name,
            is_enabled=True,
            use_custom_hours=False,
            start_time=DEFAULT_START_TIME,
            end_time=DEFAULT_END_TIME,
            interval_minutes=DEFAULT_INTERVAL,
        )
        self.db.add(post)
        await self.db.commit()
        await self.db.refresh(post)
        logger.info("Created post %s (%s)", post.id, post.name)
        return post

    async def update(self, post_id: str, patch: dict) -> Post:
        """Apply a partial patch.

        Start/end times are normalized to HH:MM. With custom hours on, the
        merged start must come before the merged end; the values are never
        swapped.
        """
        post = await self.get(post_id)
        if post is None:
            raise NotFoundError("Post not found")

        patch = {k: v for k, v in patch.items() if v is not None}

        if "name" in patch:
            name = patch["name"].strip()
            if not name:
                raise ValidationError("Post name must not be empty")
            patch["name"] = name
        if "interval_minutes" in patch and patch["interval_minutes"] not in ALLOWED_INTERVALS:
            raise ValidationError(
                f"interval_minutes must be one of {', '.join(map(str, ALLOWED_INTERVALS))}"
            )
        if "start_time" in patch:
            patch["start_time"] = minutes_to_hhmm(hhmm_to_minutes(patch["start_time"]))
        if "end_time" in patch:
            patch["end_time"] = minutes_to_hhmm(hhmm_to_minutes(patch["end_time"], allow_end_of_day=True))

        use_custom = patch.get("use_custom_hours", post.use_custom_hours)
        start = patch.get("start_time", post.start_time)
        end = patch.get("end_time", post.end_time)
        if use_custom and hhmm_to_minutes(start) >= hhmm_to_minutes(end, allow_end_of_day=True):
            raise ValidationError(f"start_time ({start}) must be before end_time ({end})")

        for key, value in patch.items():
            setattr(post, key, value)
        await self.db.commit()
        await self.db.refresh(post)
        logger.info("Updated post %s: %s", post_id, sorted(patch))
        return post

    async def delete(self, post_id: str) -> bool:
        """Delete a post together with its closed-slot overlay."""
        post = await self.get(post_id)
        if post is None:
            return False
        await self.db.execute(sa_delete(PostClosedSlot).where(PostClosedSlot.post_id == post_id))
        await self.db.delete(post)
        await self.db.commit()
        logger.info("Deleted post %s", post_id)
        return True
