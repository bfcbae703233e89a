"""Tests for slot generation."""

from datetime import date, datetime

import pytest

from app.models.booking import Booking, BookingStatus
from app.services.closed_slots import ClosedSlotOverlay
from app.services.posts import PostRegistry
from app.services.slots import SlotEngine
from app.services.working_hours import WorkingHoursPolicy

DAY = date(2026, 3, 1)


def times_of_day(slots):
    return [slot.time_of_day for slot in slots]


async def add_booking(db, post_id, when, status=BookingStatus.PENDING):
    booking = Booking(
        post_id=post_id,
        date_time=when,
        status=status,
        service_name="Wash",
        user_name="Ivan",
        price=1000,
        duration=30,
    )
    db.add(booking)
    await db.commit()
    return booking


@pytest.mark.asyncio
async def test_default_day_has_eighteen_slots(db, clock):
    await PostRegistry(db).ensure_default()
    slots = await SlotEngine(db, now=clock).generate_slots("post_1", DAY)

    assert len(slots) == 18
    assert slots[0].time == "2026-03-01T09:00:00Z"
    assert slots[-1].time == "2026-03-01T17:30:00Z"
    assert [s.start for s in slots] == sorted(s.start for s in slots)
    assert not any(s.is_closed for s in slots)


@pytest.mark.asyncio
async def test_as_dict_shape(db, clock):
    await PostRegistry(db).ensure_default()
    slots = await SlotEngine(db, now=clock).generate_slots("post_1", DAY)
    assert slots[0].as_dict() == {"time": "2026-03-01T09:00:00Z", "is_closed": False}


@pytest.mark.asyncio
async def test_unknown_post_yields_empty_list(db, clock):
    assert await SlotEngine(db, now=clock).generate_slots("post_ghost", DAY) == []


@pytest.mark.asyncio
async def test_overlay_closes_same_time_every_day(db, clock):
    await PostRegistry(db).ensure_default()
    await ClosedSlotOverlay(db).set_closed("post_1", "13:00", True)
    engine = SlotEngine(db, now=clock)

    for day in (DAY, date(2026, 3, 2), date(2026, 7, 15)):
        slots = await engine.generate_slots("post_1", day)
        closed = [s.time_of_day for s in slots if s.is_closed]
        assert closed == ["13:00"]


@pytest.mark.asyncio
async def test_reopening_restores_slot(db, clock):
    await PostRegistry(db).ensure_default()
    overlay = ClosedSlotOverlay(db)
    await overlay.set_closed("post_1", "13:00", True)
    await overlay.set_closed("post_1", "13:00", False)
    slots = await SlotEngine(db, now=clock).generate_slots("post_1", DAY)
    assert not any(s.is_closed for s in slots)


@pytest.mark.asyncio
async def test_disabled_post_closes_whole_day(db, clock):
    registry = PostRegistry(db)
    await registry.ensure_default()
    await registry.update("post_1", {"is_enabled": False})

    engine = SlotEngine(db, now=clock)
    for day in (DAY, date(2026, 12, 31)):
        slots = await engine.generate_slots("post_1", day)
        assert len(slots) == 18
        assert all(s.is_closed for s in slots)


@pytest.mark.asyncio
async def test_live_booking_closes_exact_slot_only(db, clock):
    registry = PostRegistry(db)
    await registry.ensure_default()
    other = await registry.create()
    booking = await add_booking(db, "post_1", datetime(2026, 3, 1, 9, 0))

    engine = SlotEngine(db, now=clock)
    slots = await engine.generate_slots("post_1", DAY)
    assert [s.time_of_day for s in slots if s.is_closed] == ["09:00"]
    # Other posts are unaffected
    other_slots = await engine.generate_slots(other.id, DAY)
    assert not any(s.is_closed for s in other_slots)

    booking.status = BookingStatus.CANCELLED
    await db.commit()
    slots = await engine.generate_slots("post_1", DAY)
    assert not any(s.is_closed for s in slots)


@pytest.mark.asyncio
async def test_policy_change_visible_on_next_request(db, clock):
    await PostRegistry(db).ensure_default()
    engine = SlotEngine(db, now=clock)
    assert times_of_day(await engine.generate_slots("post_1", DAY))[0] == "09:00"

    await WorkingHoursPolicy(db).set(start_hour=10)
    slots = await engine.generate_slots("post_1", DAY)
    assert slots[0].time_of_day == "10:00"
    assert len(slots) == 16


@pytest.mark.asyncio
async def test_custom_hours(db, clock):
    registry = PostRegistry(db)
    post = await registry.create()
    await registry.update(
        post.id,
        {"use_custom_hours": True, "start_time": "08:00", "end_time": "12:00", "interval_minutes": 60},
    )
    slots = await SlotEngine(db, now=clock).generate_slots(post.id, DAY)
    assert times_of_day(slots) == ["08:00", "09:00", "10:00", "11:00"]


@pytest.mark.asyncio
async def test_custom_hours_ignore_policy(db, clock):
    registry = PostRegistry(db)
    post = await registry.create()
    await registry.update(post.id, {"use_custom_hours": True, "start_time": "08:00", "end_time": "10:00"})
    await WorkingHoursPolicy(db).set(start_hour=12, end_hour=14)
    slots = await SlotEngine(db, now=clock).generate_slots(post.id, DAY)
    assert times_of_day(slots) == ["08:00", "08:30", "09:00", "09:30"]


@pytest.mark.asyncio
async def test_interval_without_trailing_partial_slot(db, clock):
    registry = PostRegistry(db)
    post = await registry.create()
    await registry.update(post.id, {"interval_minutes": 120})
    slots = await SlotEngine(db, now=clock).generate_slots(post.id, DAY)
    # 17:00 still starts before closing; 19:00 would not
    assert times_of_day(slots) == ["09:00", "11:00", "13:00", "15:00", "17:00"]


@pytest.mark.asyncio
async def test_past_date_is_all_closed(db, clock):
    await PostRegistry(db).ensure_default()
    slots = await SlotEngine(db, now=clock).generate_slots("post_1", date(2026, 1, 15))
    assert len(slots) == 18
    assert all(s.is_closed for s in slots)


@pytest.mark.asyncio
async def test_today_closes_elapsed_slots(db):
    await PostRegistry(db).ensure_default()
    engine = SlotEngine(db, now=lambda: datetime(2026, 3, 1, 12, 10))
    slots = await engine.generate_slots("post_1", DAY)
    closed = [s.time_of_day for s in slots if s.is_closed]
    assert closed[-1] == "12:00"
    assert "12:30" not in closed


@pytest.mark.asyncio
async def test_is_open(db, clock):
    await PostRegistry(db).ensure_default()
    engine = SlotEngine(db, now=clock)
    assert await engine.is_open("post_1", datetime(2026, 3, 1, 9, 0)) is True
    # Not on the slot grid
    assert await engine.is_open("post_1", datetime(2026, 3, 1, 9, 10)) is False
    # Outside working hours
    assert await engine.is_open("post_1", datetime(2026, 3, 1, 18, 0)) is False
    assert await engine.is_open("post_ghost", datetime(2026, 3, 1, 9, 0)) is False


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_post_slots_endpoint(client):
    await client.get("/api/v1/posts")
    resp = await client.get("/api/v1/posts/post_1/slots", params={"date": "2030-01-15"})
    assert resp.status_code == 200
    data = resp.json()
    assert len(data) == 18
    assert data[0] == {"time": "2030-01-15T09:00:00Z", "is_closed": False}


@pytest.mark.asyncio
async def test_post_slots_bad_date(client):
    resp = await client.get("/api/v1/posts/post_1/slots", params={"date": "15.01.2030"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_post_slots_unknown_post_is_empty(client):
    resp = await client.get("/api/v1/posts/post_ghost/slots", params={"date": "2030-01-15"})
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_client_slots_endpoint(client, admin_headers):
    await client.get("/api/v1/posts")
    await client.put(
        "/api/v1/posts/post_1/closed-slots",
        json={"time": "09:00", "closed": True},
        headers=admin_headers,
    )
    resp = await client.get("/api/v1/slots", params={"date": "2030-01-15"})
    assert resp.status_code == 200
    first, second = resp.json()[:2]
    assert first == {
        "time": "2030-01-15T09:00:00Z",
        "is_closed": True,
        "is_available": False,
        "remaining_capacity": 0,
    }
    assert second["is_available"] is True
    assert second["remaining_capacity"] == 1


@pytest.mark.asyncio
async def test_client_slots_unknown_service(client):
    resp = await client.get(
        "/api/v1/slots",
        params={"date": "2030-01-15", "service_id": "00000000-0000-0000-0000-000000000000"},
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["/api/v1/slots", "/api/v1/posts/post_1/slots"])
async def test_slots_endpoint_rejects_last_calendar_day(client, url):
    await client.get("/api/v1/posts")
    resp = await client.get(url, params={"date": "9999-12-31"})
    assert resp.status_code == 400
    assert "out of range" in resp.json()["detail"]
