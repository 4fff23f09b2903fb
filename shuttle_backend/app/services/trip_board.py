"""
Trip board.

Reads a snapshot of one date's bookings, runs the consolidator and pairs
each resulting trip with its dispatch assignment.
"""

import datetime as dt
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from shuttle_backend.app.core.exceptions import ResourceNotFoundError
from shuttle_backend.app.domain.consolidation.models import Trip
from shuttle_backend.app.domain.consolidation.time_slots import trip_key
from shuttle_backend.app.domain.consolidation.trip_consolidator import consolidate
from shuttle_backend.app.models.trip_assignment import TripAssignment
from shuttle_backend.app.services.booking_service import BookingService


async def load_trips(db: AsyncSession, service_date: dt.date, capacity: int) -> List[Trip]:
    bookings = await BookingService.list_bookings(db, service_date)
    return consolidate([b.to_domain() for b in bookings], service_date, capacity)


async def get_trip(db: AsyncSession, service_date: dt.date, slot: dt.time, capacity: int) -> Trip:
    for trip in await load_trips(db, service_date, capacity):
        if trip.time == slot:
            return trip
    raise ResourceNotFoundError("Trip", trip_key(service_date, slot))


async def build_trip_board(
    db: AsyncSession,
    service_date: dt.date,
    capacity: int,
) -> List[Tuple[Trip, Optional[TripAssignment]]]:
    """Trips of the date in slot order, each with its assignment (if any)."""
    trips = await load_trips(db, service_date, capacity)

    result = await db.execute(
        select(TripAssignment).where(TripAssignment.service_date == service_date)
    )
    assignments = {a.time_slot: a for a in result.scalars().all()}

    return [(trip, assignments.get(trip.time)) for trip in trips]
