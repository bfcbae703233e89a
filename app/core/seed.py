"""Provision scheduling defaults on app startup."""

import logging
from sqlalchemy.exc import SQLAlchemyError

from app.core.database import async_session
from app.services.posts import PostRegistry
from app.services.working_hours import WorkingHoursPolicy

logger = logging.getLogger(__name__)


async def seed_scheduling_defaults():
    """Make sure the default post and the working-hours row exist."""
    async with async_session() as db:
        try:
            post = await PostRegistry(db).ensure_default()
            policy = await WorkingHoursPolicy(db).get()
            logger.info(
                "Scheduling ready: default post %s, hours %s-%s",
                post.id,
                policy["start_hour"],
                policy["end_hour"],
            )
        except SQLAlchemyError as e:
            logger.error("Failed to seed scheduling defaults: %s", e)
            await db.rollback()
