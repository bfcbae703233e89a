"""Tests for startup provisioning and the admin seed script."""

from unittest.mock import patch

import pytest
from sqlalchemy import select

from app.core.seed import seed_scheduling_defaults
from app.models.post import Post
from app.models.user import User
from app.models.working_hours import WorkingHours
from app.scripts.seed_admin import create_or_update_admin
from app.services.auth import decode_access_token


@pytest.mark.asyncio
async def test_seed_scheduling_defaults(setup_db, db):
    with patch("app.core.seed.async_session", setup_db):
        await seed_scheduling_defaults()
        await seed_scheduling_defaults()

    posts = (await db.execute(select(Post))).scalars().all()
    assert [p.id for p in posts] == ["post_1"]
    assert await db.get(WorkingHours, 1) is not None


@pytest.mark.asyncio
async def test_seed_admin_creates_then_promotes(setup_db, db, client_user):
    with patch("app.scripts.seed_admin.async_session", setup_db):
        token = await create_or_update_admin("admin@example.com", "Anna")
        await create_or_update_admin("ivan@example.com", "ignored", phone="+15550000000")

    admin = (await db.execute(select(User).where(User.email == "admin@example.com"))).scalar_one()
    assert admin.is_admin
    assert decode_access_token(token)["sub"] == str(admin.id)

    await db.refresh(client_user)
    assert client_user.is_admin
    assert client_user.first_name == "Ivan"
    assert client_user.phone == "+15550000000"
