"""
Booking Service.

Handles booking intake and the dispatcher-driven status lifecycle:

    REGISTERED -> CONFIRMED -> PICKED_UP
    REGISTERED | CONFIRMED -> NO_SHOW
"""

import datetime as dt
import logging
import uuid
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from shuttle_backend.app.core.config import settings
from shuttle_backend.app.core.exceptions import (
    InvalidBookingError,
    InvalidStatusTransitionError,
    ResourceNotFoundError,
)
from shuttle_backend.app.domain.consolidation.time_slots import parse_time_slot
from shuttle_backend.app.models.shuttle_booking import ShuttleBooking
from shuttle_backend.app.models.shuttle_enums import ShuttleStatus
from shuttle_backend.app.schemas.booking import BookingCreate

logger = logging.getLogger("shuttle.bookings")

ALLOWED_TRANSITIONS = {
    ShuttleStatus.REGISTERED: {ShuttleStatus.CONFIRMED, ShuttleStatus.NO_SHOW},
    ShuttleStatus.CONFIRMED: {ShuttleStatus.PICKED_UP, ShuttleStatus.NO_SHOW},
    ShuttleStatus.PICKED_UP: set(),
    ShuttleStatus.NO_SHOW: set(),
}


def new_booking_id() -> str:
    return f"s{uuid.uuid4().hex[:12]}"


class BookingService:

    @staticmethod
    def resolve_itinerary(data: BookingCreate) -> tuple:
        """Return (pickup_location, destination) for a booking request."""
        if not data.route_id:
            return data.pickup_location, None

        route = settings.shuttle_routes.get(data.route_id)
        if route is None:
            raise InvalidBookingError(f"Unknown route {data.route_id}", field="routeId")

        specific = data.specific_location or data.pickup_location or settings.default_pickup_point
        return f"{route.origin} ({specific})", route.destination

    @staticmethod
    async def create_booking(db: AsyncSession, data: BookingCreate) -> ShuttleBooking:
        """
        Create a REGISTERED booking stamped with the current time.

        The caller commits.
        """
        pickup_location, destination = BookingService.resolve_itinerary(data)

        booking = ShuttleBooking(
            id=new_booking_id(),
            guest_name=data.guest_name,
            guest_phone=data.guest_phone,
            route_id=data.route_id,
            pickup_location=pickup_location,
            destination=destination,
            service_date=data.date,
            time_slot=parse_time_slot(data.time_slot),
            pax_count=data.pax_count,
            total_price=data.pax_count * settings.price_per_seat,
            is_vip=data.is_vip,
            booking_time=dt.datetime.now(dt.timezone.utc),
            status=ShuttleStatus.REGISTERED,
            notes=data.notes,
        )
        db.add(booking)
        await db.flush()

        logger.info(
            "Booked %d seats for %s on %s %s",
            booking.pax_count, booking.guest_name, data.date, data.time_slot,
        )
        return booking

    @staticmethod
    async def get_booking(db: AsyncSession, booking_id: str) -> ShuttleBooking:
        booking = await db.get(ShuttleBooking, booking_id)
        if not booking:
            raise ResourceNotFoundError("Booking", booking_id)
        return booking

    @staticmethod
    async def list_bookings(db: AsyncSession, service_date: Optional[dt.date] = None) -> List[ShuttleBooking]:
        """Bookings in a stable snapshot order: booking time, then id."""
        query = select(ShuttleBooking)
        if service_date is not None:
            query = query.where(ShuttleBooking.service_date == service_date)
        query = query.order_by(ShuttleBooking.booking_time, ShuttleBooking.id)

        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def update_status(db: AsyncSession, booking_id: str, new_status: ShuttleStatus) -> ShuttleBooking:
        """
        Move a booking along its lifecycle.

        Raises:
            ResourceNotFoundError: unknown booking
            InvalidStatusTransitionError: move not allowed from the current status
        """
        booking = await BookingService.get_booking(db, booking_id)

        if new_status not in ALLOWED_TRANSITIONS[booking.status]:
            raise InvalidStatusTransitionError(booking.id, booking.status.value, new_status.value)

        previous = booking.status
        booking.status = new_status
        await db.flush()

        logger.info("Booking %s moved %s -> %s", booking.id, previous.value, new_status.value)
        return booking
