"""Booking endpoints: creation, listing and the admin lifecycle controls."""

import logging
from typing import Union
from uuid import UUID
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.deps import get_current_user, require_admin
from app.core.errors import NotFoundError
from app.models.booking import Booking
from app.models.user import User
from app.schemas.booking import (
    BookingControlUpdate,
    BookingCreate,
    BookingEmployeeAssign,
    BookingOut,
    BookingRatingIn,
    BookingStatusUpdate,
    ClientBookingOut,
)
from app.services.booking_notifier import BookingNotifier, DeferredNotifier, get_notifier
from app.services.bookings import BookingManager

router = APIRouter()
logger = logging.getLogger(__name__)


def get_booking_manager(
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    notifier: BookingNotifier = Depends(get_notifier),
) -> BookingManager:
    return BookingManager(db, notifier=DeferredNotifier(background_tasks, notifier))


def _render(booking: Booking, user: User) -> Union[BookingOut, ClientBookingOut]:
    """Admins see the control fields; clients do not."""
    if user.is_admin:
        return BookingOut.model_validate(booking)
    return ClientBookingOut.model_validate(booking)


def _check_owner(booking: Booking, user: User) -> None:
    if not user.is_admin and booking.user_id != user.id:
        raise HTTPException(status_code=403, detail="Not your booking")


@router.get("", response_model=list[Union[BookingOut, ClientBookingOut]])
async def list_bookings(
    manager: BookingManager = Depends(get_booking_manager),
    current_user: User = Depends(get_current_user),
):
    """All bookings for admins, the caller's own bookings for clients."""
    user_id = None if current_user.is_admin else current_user.id
    bookings = await manager.list_bookings(user_id=user_id)
    return [_render(b, current_user) for b in bookings]


@router.post("", response_model=Union[BookingOut, ClientBookingOut], status_code=201)
async def create_booking(
    body: BookingCreate,
    manager: BookingManager = Depends(get_booking_manager),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Book an open slot. Admins may book on behalf of a client via ``user_id``."""
    user = current_user
    if body.user_id is not None and current_user.is_admin:
        user = await db.get(User, body.user_id)
        if user is None:
            raise NotFoundError("User not found")

    booking = await manager.create(
        service_id=body.service_id,
        date_time=body.date_time,
        user=user,
        post_id=body.post_id,
        notes=body.notes,
    )
    return _render(booking, current_user)


@router.get("/{booking_id}", response_model=Union[BookingOut, ClientBookingOut])
async def get_booking(
    booking_id: UUID,
    manager: BookingManager = Depends(get_booking_manager),
    current_user: User = Depends(get_current_user),
):
    booking = await manager.get(booking_id)
    _check_owner(booking, current_user)
    return _render(booking, current_user)


@router.delete("/{booking_id}", status_code=204)
async def delete_booking(
    booking_id: UUID,
    manager: BookingManager = Depends(get_booking_manager),
    admin: User = Depends(require_admin),
):
    if not await manager.delete(booking_id):
        raise NotFoundError("Booking not found")


@router.put("/{booking_id}/status", response_model=BookingOut)
async def update_booking_status(
    booking_id: UUID,
    body: BookingStatusUpdate,
    manager: BookingManager = Depends(get_booking_manager),
    admin: User = Depends(require_admin),
):
    return await manager.set_status(booking_id, body.status)


@router.patch("/{booking_id}/control", response_model=BookingOut)
async def update_booking_control(
    booking_id: UUID,
    body: BookingControlUpdate,
    manager: BookingManager = Depends(get_booking_manager),
    admin: User = Depends(require_admin),
):
    """Follow-up call tracking. An explicit ``"comment": null`` clears the comment."""
    return await manager.update_control(
        booking_id,
        status=body.status,
        comment=body.comment,
        comment_given="comment" in body.model_fields_set,
    )


@router.patch("/{booking_id}/employee", response_model=BookingOut)
async def assign_booking_employee(
    booking_id: UUID,
    body: BookingEmployeeAssign,
    manager: BookingManager = Depends(get_booking_manager),
    admin: User = Depends(require_admin),
):
    return await manager.assign_employee(booking_id, body.employee_id)


@router.post("/{booking_id}/rating", response_model=ClientBookingOut)
async def rate_booking(
    booking_id: UUID,
    body: BookingRatingIn,
    manager: BookingManager = Depends(get_booking_manager),
    current_user: User = Depends(get_current_user),
):
    """Clients rate their own bookings (1-5, rounded)."""
    booking = await manager.get(booking_id)
    _check_owner(booking, current_user)
    return await manager.rate(booking_id, body.rating, body.comment)
