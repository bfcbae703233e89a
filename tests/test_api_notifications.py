"""Tests for the in-app notification feed."""

import pytest


async def confirm_new_booking(client, client_headers, admin_headers, service):
    resp = await client.post(
        "/api/v1/bookings",
        json={"service_id": str(service.id), "date_time": "2030-01-15T09:00:00Z"},
        headers=client_headers,
    )
    booking_id = resp.json()["id"]
    await client.put(
        f"/api/v1/bookings/{booking_id}/status",
        json={"status": "confirmed"},
        headers=admin_headers,
    )
    return booking_id


@pytest.mark.asyncio
async def test_confirmation_lands_in_feed(client, client_headers, admin_headers, service):
    await confirm_new_booking(client, client_headers, admin_headers, service)

    resp = await client.get("/api/v1/notifications", headers=client_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 1
    item = data["notifications"][0]
    assert item["title"] == "Booking confirmed"
    assert item["type"] == "service"
    assert "2030-01-15T09:00:00Z" in item["message"]

    count = await client.get("/api/v1/notifications/unread-count", headers=client_headers)
    assert count.json() == {"count": 1}


@pytest.mark.asyncio
async def test_mark_read(client, client_headers, admin_headers, other_headers, service):
    await confirm_new_booking(client, client_headers, admin_headers, service)
    notification_id = (await client.get("/api/v1/notifications", headers=client_headers)).json()["notifications"][0]["id"]

    resp = await client.put(f"/api/v1/notifications/{notification_id}/read", headers=other_headers)
    assert resp.status_code == 404

    resp = await client.put(f"/api/v1/notifications/{notification_id}/read", headers=client_headers)
    assert resp.json()["is_read"] is True
    count = await client.get("/api/v1/notifications/unread-count", headers=client_headers)
    assert count.json() == {"count": 0}


@pytest.mark.asyncio
async def test_mark_all_read(client, client_headers, admin_headers, service):
    await confirm_new_booking(client, client_headers, admin_headers, service)
    resp = await client.put("/api/v1/notifications/mark-all-read", headers=client_headers)
    assert resp.json() == {"count": 0}
    count = await client.get("/api/v1/notifications/unread-count", headers=client_headers)
    assert count.json() == {"count": 0}
