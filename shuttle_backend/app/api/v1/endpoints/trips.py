"""
Trip API Endpoints.

Trips are never stored: every call regroups the bookings of the requested
date and reallocates seats.
"""

import datetime as dt
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from shuttle_backend.app.core.dependencies import capacity_query
from shuttle_backend.app.db.session import get_db
from shuttle_backend.app.domain.consolidation.trip_consolidator import consolidate
from shuttle_backend.app.schemas.dispatch import AssignmentResponse
from shuttle_backend.app.schemas.trip import (
    ConsolidateRequest,
    TripBoardEntry,
    TripBoardResponse,
    TripResponse,
)
from shuttle_backend.app.services.trip_board import build_trip_board

router = APIRouter(prefix="/trips", tags=["Shuttle Trips"])


@router.get("", response_model=TripBoardResponse)
async def get_trip_board(
    date: dt.date = Query(..., description="Operating date"),
    capacity: int = Depends(capacity_query),
    db: AsyncSession = Depends(get_db)
):
    """
    Trips of a date with priority-ordered manifests and dispatch state.

    Passengers are ordered VIP first, then by booking time; bookings that
    do not fit in `capacity` seats are flagged `isOverflow`.
    """
    board = await build_trip_board(db, date, capacity)

    entries = []
    for trip, assignment in board:
        trip_view = TripResponse.from_domain(trip)
        entries.append(TripBoardEntry(
            **trip_view.model_dump(),
            capacity=trip.capacity,
            overflow_pax=trip.overflow_pax,
            assignment=AssignmentResponse.from_model(assignment) if assignment else None,
        ))

    return TripBoardResponse(date=date, capacity=capacity, trips=entries)


@router.post("/consolidate", response_model=List[TripResponse])
async def consolidate_bookings(request: ConsolidateRequest):
    """
    Consolidate the submitted bookings without touching storage.

    Returns 422 ERR_CAPACITY_001 for a non-positive capacity and
    ERR_BOOKING_001 for a booking with non-positive seats or no slot/date.
    """
    bookings = [payload.to_domain() for payload in request.bookings]
    trips = consolidate(bookings, request.date, request.capacity)
    return [TripResponse.from_domain(trip) for trip in trips]
