"""
Dispatch API Endpoints.

Dispatchers put a vehicle and a driver on a departure, then send the
pickup SMS to its accepted passengers.
"""

import datetime as dt

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from shuttle_backend.app.core.dependencies import capacity_query, time_slot_path
from shuttle_backend.app.core.redis_client import get_redis
from shuttle_backend.app.db.session import get_db
from shuttle_backend.app.domain.consolidation.time_slots import format_time_slot, trip_key
from shuttle_backend.app.schemas.dispatch import AssignmentResponse, AssignmentUpdate, NotifyResponse
from shuttle_backend.app.services.audit import log_event, AuditAction
from shuttle_backend.app.services.dispatch_service import DispatchService
from shuttle_backend.app.services.sms_gateway import SmsGateway, get_sms_gateway

router = APIRouter(prefix="/dispatch", tags=["Dispatch"])


@router.get("/trips/{date}/{time_slot}/assignment", response_model=AssignmentResponse)
async def get_assignment(
    date: dt.date = Path(..., description="Operating date"),
    slot: dt.time = Depends(time_slot_path),
    db: AsyncSession = Depends(get_db)
):
    assignment = await DispatchService.require_assignment(db, date, slot)
    return AssignmentResponse.from_model(assignment)


@router.put("/trips/{date}/{time_slot}/assignment", response_model=AssignmentResponse)
async def assign_trip(
    update: AssignmentUpdate,
    date: dt.date = Path(..., description="Operating date"),
    slot: dt.time = Depends(time_slot_path),
    db: AsyncSession = Depends(get_db)
):
    """
    Assign a vehicle and/or a driver to a departure.

    Validates:
    - Vehicle is AVAILABLE and has enough seats for a shuttle run
    - Driver exists
    - Passengers were not notified yet
    """
    assignment = await DispatchService.assign(db, date, slot, update)
    await db.commit()
    await db.refresh(assignment)

    await log_event(
        db=db,
        action=AuditAction.TRIP_ASSIGNED,
        entity_type="trip",
        entity_id=trip_key(date, slot),
        metadata={"vehicle_id": assignment.vehicle_id, "driver_id": assignment.driver_id}
    )

    return AssignmentResponse.from_model(assignment)


@router.post("/trips/{date}/{time_slot}/notify", response_model=NotifyResponse)
async def notify_passengers(
    date: dt.date = Path(..., description="Operating date"),
    slot: dt.time = Depends(time_slot_path),
    capacity: int = Depends(capacity_query),
    db: AsyncSession = Depends(get_db),
    redis=Depends(get_redis),
    gateway: SmsGateway = Depends(get_sms_gateway)
):
    """
    Send pickup time, driver and vehicle details to accepted passengers.

    Requires both a vehicle and a driver on the trip. Overflow passengers
    and NO_SHOW bookings are not notified. A trip can be notified once.
    """
    # Commits inside the trip lock
    result = await DispatchService.notify(db, redis, gateway, date, slot, capacity)

    await log_event(
        db=db,
        action=AuditAction.TRIP_NOTIFIED,
        entity_type="trip",
        entity_id=trip_key(date, slot),
        metadata={
            "accepted_pax": result.trip.accepted_pax,
            "recipients": result.recipients,
            "failed": result.failed,
        }
    )

    return NotifyResponse(
        time=format_time_slot(result.trip.time),
        accepted_pax=result.trip.accepted_pax,
        recipients=result.recipients,
        failed=result.failed,
        notified=result.notified,
    )
