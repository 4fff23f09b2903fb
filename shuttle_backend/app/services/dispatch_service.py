"""
Dispatch Service.

Owns the persisted side of a trip: which vehicle and driver run a
departure, and whether its passengers were told. Trips themselves are
recomputed from bookings through the trip board on every call.
"""

import datetime as dt
import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from shuttle_backend.app.core.config import settings
from shuttle_backend.app.core.exceptions import (
    AssignmentIncompleteError,
    AssignmentLockedError,
    EmptyTripError,
    ResourceNotFoundError,
    VehicleNotEligibleError,
)
from shuttle_backend.app.core.reliability import CircuitOpenError, sms_circuit_breaker
from shuttle_backend.app.domain.consolidation.models import Booking, Trip
from shuttle_backend.app.domain.consolidation.time_slots import format_time_slot, trip_key
from shuttle_backend.app.models.driver import Driver
from shuttle_backend.app.models.notification import Notification, NotificationStatus
from shuttle_backend.app.models.shuttle_enums import ShuttleStatus, VehicleStatus
from shuttle_backend.app.models.trip_assignment import TripAssignment
from shuttle_backend.app.models.vehicle import Vehicle
from shuttle_backend.app.schemas.dispatch import AssignmentUpdate
from shuttle_backend.app.services.sms_gateway import SmsDeliveryError, SmsGateway
from shuttle_backend.app.services.trip_board import get_trip

logger = logging.getLogger("shuttle.dispatch")


@dataclass
class NotifyResult:
    trip: Trip
    recipients: int
    failed: int
    notified: bool


def check_vehicle_eligible(vehicle: Vehicle) -> None:
    """A shuttle vehicle must be free and large enough for a shared run."""
    if vehicle.status != VehicleStatus.AVAILABLE:
        raise VehicleNotEligibleError(vehicle.id, f"status is {vehicle.status.value}")
    if vehicle.seats < settings.shuttle_min_vehicle_seats:
        raise VehicleNotEligibleError(
            vehicle.id, f"{vehicle.seats} seats, shuttles need at least {settings.shuttle_min_vehicle_seats}"
        )


def pickup_message(trip: Trip, booking: Booking, vehicle: Vehicle, driver: Driver) -> str:
    return (
        f"Shuttle {trip.date.isoformat()} {format_time_slot(trip.time)}: "
        f"{booking.pax_count} seat(s) confirmed, pickup at {booking.pickup_location}. "
        f"Driver {driver.name} ({driver.phone}), vehicle {vehicle.plate}."
    )


class DispatchService:

    @staticmethod
    async def get_assignment(
        db: AsyncSession, service_date: dt.date, slot: dt.time, refresh: bool = False
    ) -> Optional[TripAssignment]:
        """`refresh` rereads the row even if this session already holds it."""
        query = select(TripAssignment).where(
            TripAssignment.service_date == service_date,
            TripAssignment.time_slot == slot,
        )
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    @staticmethod
    async def require_assignment(db: AsyncSession, service_date: dt.date, slot: dt.time) -> TripAssignment:
        assignment = await DispatchService.get_assignment(db, service_date, slot)
        if not assignment:
            raise ResourceNotFoundError("Trip assignment", trip_key(service_date, slot))
        return assignment

    @staticmethod
    async def assign(
        db: AsyncSession,
        service_date: dt.date,
        slot: dt.time,
        update: AssignmentUpdate,
    ) -> TripAssignment:
        """
        Set the vehicle and/or driver of a departure.

        Validates:
        - Vehicle exists, is AVAILABLE and large enough
        - Driver exists
        - Passengers have not been notified yet (the assignment is then locked)

        The caller commits.
        """
        key = trip_key(service_date, slot)
        assignment = await DispatchService.get_assignment(db, service_date, slot)

        if assignment and assignment.notified:
            raise AssignmentLockedError(key, "Passengers were already notified; the assignment is locked")

        if update.vehicle_id is not None:
            vehicle = await db.get(Vehicle, update.vehicle_id)
            if not vehicle:
                raise ResourceNotFoundError("Vehicle", update.vehicle_id)
            check_vehicle_eligible(vehicle)

        if update.driver_id is not None:
            driver = await db.get(Driver, update.driver_id)
            if not driver:
                raise ResourceNotFoundError("Driver", update.driver_id)

        if assignment is None:
            assignment = TripAssignment(service_date=service_date, time_slot=slot, notified=False)
            db.add(assignment)

        if update.vehicle_id is not None:
            assignment.vehicle_id = update.vehicle_id
        if update.driver_id is not None:
            assignment.driver_id = update.driver_id

        await db.flush()

        logger.info(
            "Trip %s assigned vehicle=%s driver=%s", key, assignment.vehicle_id, assignment.driver_id
        )
        return assignment

    @staticmethod
    async def notify(
        db: AsyncSession,
        redis,
        gateway: SmsGateway,
        service_date: dt.date,
        slot: dt.time,
        capacity: int,
    ) -> NotifyResult:
        """
        Send pickup details to every accepted passenger of a departure.

        Flow:
        1. Take the per-trip Redis lock so two dispatchers cannot double-send
        2. Reload the assignment and require it complete and not yet notified
        3. Recompute the trip (overflow passengers are never notified)
        4. Send one SMS per accepted booking through the circuit breaker,
           recording each attempt; NO_SHOW bookings are skipped
        5. Mark the assignment notified if at least one message went out
        6. Commit, then release the lock

        The lock is held until the commit so the next holder always sees
        the notified flag.
        """
        key = trip_key(service_date, slot)
        lock_key = f"shuttle:notify:{key}"
        token = uuid.uuid4().hex
        acquired = await redis.set(lock_key, token, nx=True, ex=settings.notify_lock_ttl_seconds)
        if not acquired:
            raise AssignmentLockedError(key, "A notification for this trip is already in progress")

        try:
            trip = await get_trip(db, service_date, slot, capacity)

            assignment = await DispatchService.get_assignment(db, service_date, slot, refresh=True)
            if assignment is None or not assignment.is_complete:
                raise AssignmentIncompleteError(key)
            if assignment.notified:
                raise AssignmentLockedError(key)
            if trip.accepted_pax == 0:
                raise EmptyTripError(key)

            vehicle = await db.get(Vehicle, assignment.vehicle_id)
            driver = await db.get(Driver, assignment.driver_id)

            sent = 0
            failed = 0
            for passenger in trip.accepted:
                booking = passenger.booking
                if booking.status == ShuttleStatus.NO_SHOW:
                    logger.info("Skipping booking %s: marked NO_SHOW", booking.id)
                    continue
                message = pickup_message(trip, booking, vehicle, driver)
                notification = Notification(
                    booking_id=booking.id,
                    phone=booking.guest_phone,
                    service_date=service_date,
                    time_slot=slot,
                    message=message,
                )
                try:
                    await sms_circuit_breaker.call(gateway.send, booking.guest_phone, message)
                except (SmsDeliveryError, CircuitOpenError) as exc:
                    failed += 1
                    notification.status = NotificationStatus.FAILED
                    notification.error = str(exc)[:255]
                    logger.warning("SMS to booking %s failed: %s", booking.id, exc)
                else:
                    sent += 1
                    notification.status = NotificationStatus.SENT
                db.add(notification)

            if sent:
                assignment.notified = True
                assignment.notified_at = dt.datetime.now(dt.timezone.utc)
            await db.commit()
        finally:
            if await redis.get(lock_key) == token:
                await redis.delete(lock_key)

        logger.info(
            "Trip %s: notified %d bookings (%d seats), %d failed", key, sent, trip.accepted_pax, failed
        )
        return NotifyResult(trip=trip, recipients=sent, failed=failed, notified=assignment.notified)
