"""
Shuttle Booking API Endpoints.

Booking intake and the dispatcher actions on a booking
(call-to-confirm, pickup, no-show).
"""

import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, status, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shuttle_backend.app.db.session import get_db
from shuttle_backend.app.schemas.booking import (
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
)
from shuttle_backend.app.services.audit import log_event, get_entity_history, AuditAction
from shuttle_backend.app.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["Shuttle Bookings"])


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Place a shuttle booking.

    The booking starts REGISTERED, is stamped with the current time for
    first-come-first-served priority and priced per seat.
    """
    booking = await BookingService.create_booking(db, booking_data)
    await db.commit()
    await db.refresh(booking)

    await log_event(
        db=db,
        action=AuditAction.BOOKING_CREATED,
        entity_type="booking",
        entity_id=booking.id,
        metadata={
            "date": booking.service_date.isoformat(),
            "time_slot": booking_data.time_slot,
            "pax_count": booking.pax_count,
            "is_vip": booking.is_vip,
        }
    )

    return BookingResponse.from_domain(booking.to_domain())


@router.get("", response_model=BookingListResponse)
async def list_bookings(
    date: Optional[dt.date] = Query(None, description="Only bookings for this operating date"),
    db: AsyncSession = Depends(get_db)
):
    """List bookings, oldest first."""
    bookings = await BookingService.list_bookings(db, date)
    return BookingListResponse(
        bookings=[BookingResponse.from_domain(b.to_domain()) for b in bookings],
        total=len(bookings),
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str = Path(..., description="Booking ID"),
    db: AsyncSession = Depends(get_db)
):
    booking = await BookingService.get_booking(db, booking_id)
    return BookingResponse.from_domain(booking.to_domain())


@router.patch("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: str = Path(..., description="Booking ID"),
    update: BookingStatusUpdate = ...,
    db: AsyncSession = Depends(get_db)
):
    """
    Move a booking along its lifecycle.

    REGISTERED -> CONFIRMED -> PICKED_UP, or NO_SHOW before pickup.
    Returns 409 for any other move.
    """
    booking = await BookingService.get_booking(db, booking_id)
    previous = booking.status

    booking = await BookingService.update_status(db, booking_id, update.status)
    await db.commit()
    await db.refresh(booking)

    await log_event(
        db=db,
        action=AuditAction.BOOKING_STATUS_CHANGED,
        entity_type="booking",
        entity_id=booking.id,
        metadata={"from": previous.value, "to": booking.status.value}
    )

    return BookingResponse.from_domain(booking.to_domain())


@router.get("/{booking_id}/history")
async def get_booking_history(
    booking_id: str = Path(..., description="Booking ID"),
    db: AsyncSession = Depends(get_db)
) -> List[dict]:
    """Audit trail of a booking, newest first."""
    await BookingService.get_booking(db, booking_id)
    events = await get_entity_history(db, "booking", booking_id)
    return [
        {"action": e.action, "metadata": e.meta_data, "timestamp": e.timestamp}
        for e in events
    ]
