"""Shared test fixtures for the booking API tests.

Uses an in-memory SQLite async engine so tests run without PostgreSQL.
"""

import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from datetime import datetime
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine, AsyncSession
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_db
from app.main import app

# Import all models to ensure they're registered with Base.metadata
from app.models.booking import Booking  # noqa: F401
from app.models.employee import Employee  # noqa: F401
from app.models.notification import Notification  # noqa: F401
from app.models.post import Post, PostClosedSlot  # noqa: F401
from app.models.service import Service
from app.models.user import User, ROLE_ADMIN, ROLE_CLIENT
from app.models.working_hours import WorkingHours  # noqa: F401
from app.services.auth import create_access_token
from app.services.booking_notifier import get_notifier


# Use aiosqlite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Fixed clock for service-level tests: slots on 2026-03-01 onwards are in the future
FROZEN_NOW = datetime(2026, 2, 1, 12, 0, 0)


def frozen_now() -> datetime:
    return FROZEN_NOW


class RecordingNotifier:
    """Stands in for BookingNotifier and remembers what it was asked to send."""

    def __init__(self):
        self.events = []

    async def notify(self, event, booking, client=None):
        self.events.append((event, booking.id, client.id if client else None))

    @property
    def event_names(self):
        return [event.value for event, _, _ in self.events]


@pytest_asyncio.fixture(autouse=True)
async def setup_db():
    """Fresh in-memory database per test."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield session_factory
    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest.fixture(autouse=True)
def notifier():
    """Keep every test away from Telegram/Twilio/SendGrid."""
    recorder = RecordingNotifier()
    app.dependency_overrides[get_notifier] = lambda: recorder
    yield recorder
    app.dependency_overrides.pop(get_notifier, None)


@pytest_asyncio.fixture
async def client():
    """Async HTTP test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def db(setup_db):
    """Direct DB session for test setup/assertions."""
    async with setup_db() as session:
        yield session


@pytest_asyncio.fixture
async def admin_user(db):
    user = User(first_name="Anna", last_name="Admin", email="admin@example.com", role=ROLE_ADMIN)
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def client_user(db):
    user = User(
        first_name="Ivan",
        last_name="Petrov",
        email="ivan@example.com",
        phone="+15551234567",
        telegram_chat_id="4242",
        role=ROLE_CLIENT,
    )
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def other_client(db):
    user = User(first_name="Olga", last_name="Smirnova", email="olga@example.com", role=ROLE_CLIENT)
    db.add(user)
    await db.commit()
    return user


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def client_headers(client_user):
    return auth_headers(client_user)


@pytest_asyncio.fixture
async def service(db):
    svc = Service(name="Complex wash", description="Body and interior", price=1500, duration=60, category="wash")
    db.add(svc)
    await db.commit()
    return svc


@pytest.fixture
def other_headers(other_client):
    return auth_headers(other_client)


@pytest.fixture
def clock():
    return frozen_now
