"""Tests for the bearer-token boundary."""

import uuid
from datetime import timedelta

import pytest

from app.services.auth import create_access_token, decode_access_token


def test_token_round_trip():
    token = create_access_token({"sub": "abc"})
    assert decode_access_token(token)["sub"] == "abc"


def test_expired_token_rejected():
    token = create_access_token({"sub": "abc"}, expires_delta=timedelta(minutes=-1))
    assert decode_access_token(token) is None


def test_garbage_token_rejected():
    assert decode_access_token("not-a-jwt") is None


@pytest.mark.asyncio
async def test_invalid_token_is_401(client):
    resp = await client.get("/api/v1/bookings", headers={"Authorization": "Bearer nope"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_unknown_user_is_401(client):
    token = create_access_token({"sub": str(uuid.uuid4())})
    resp = await client.get("/api/v1/bookings", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_non_uuid_subject_is_401(client):
    token = create_access_token({"sub": "admin"})
    resp = await client.get("/api/v1/bookings", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_disabled_user_is_403(client, db, client_user, client_headers):
    client_user.is_active = False
    await db.commit()
    resp = await client.get("/api/v1/bookings", headers=client_headers)
    assert resp.status_code == 403
