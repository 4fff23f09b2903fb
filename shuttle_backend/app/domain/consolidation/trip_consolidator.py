"""
Trip consolidation and capacity allocation.

Turns a flat set of shuttle bookings into the departures of one operating
date:

1. keep the bookings of the requested date
2. group them by time slot, one trip per slot, trips in slot order
   (labels that are not HH:MM form their own trips, after the rest)
3. order each manifest: VIP first, then earliest booking_time (stable)
4. walk the manifest once, admitting whole bookings while seats remain

Admission is greedy and all-or-nothing per booking. A booking that does
not fit is marked overflow and never takes seats; a later, smaller booking
may still fit into what is left. Nothing here does I/O or keeps state, so
the result depends only on the arguments.
"""

import datetime as dt
import logging
from typing import Dict, Iterable, List

from shuttle_backend.app.core.exceptions import InvalidBookingError, InvalidCapacityError
from shuttle_backend.app.domain.consolidation.models import Booking, Passenger, Trip
from shuttle_backend.app.domain.consolidation.time_slots import Slot, slot_sort_key

logger = logging.getLogger("shuttle.consolidation")


def validate_capacity(capacity) -> int:
    if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
        raise InvalidCapacityError(capacity)
    return capacity


def validate_booking(booking: Booking) -> None:
    """Reject bookings that would distort the load; values are never coerced."""
    pax = booking.pax_count
    if isinstance(pax, bool) or not isinstance(pax, int) or pax <= 0:
        raise InvalidBookingError(
            f"Booking {booking.id} must request a positive number of seats, got {pax!r}",
            booking_id=booking.id,
            field="paxCount",
        )
    if booking.time_slot is None:
        raise InvalidBookingError(
            f"Booking {booking.id} has no time slot", booking_id=booking.id, field="timeSlot"
        )
    if booking.date is None:
        raise InvalidBookingError(
            f"Booking {booking.id} has no date", booking_id=booking.id, field="date"
        )
    if booking.booking_time is None:
        raise InvalidBookingError(
            f"Booking {booking.id} has no booking time", booking_id=booking.id, field="bookingTime"
        )


def _as_utc(moment: dt.datetime) -> dt.datetime:
    # SQLite hands back naive timestamps; they are stored as UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=dt.timezone.utc)
    return moment


def priority_key(booking: Booking):
    """Sort key: VIP tier first, then first come first served."""
    return (not booking.is_vip, _as_utc(booking.booking_time))


def allocate_trip(service_date: dt.date, slot: Slot, bookings: List[Booking], capacity: int) -> Trip:
    """Order one slot's bookings and admit them into `capacity` seats."""
    ordered = sorted(bookings, key=priority_key)

    current_load = 0
    passengers = []
    for booking in ordered:
        projected_load = current_load + booking.pax_count
        is_overflow = projected_load > capacity
        if not is_overflow:
            current_load = projected_load
        passengers.append(Passenger(booking=booking, is_overflow=is_overflow))

    total_pax = sum(b.pax_count for b in ordered)
    return Trip(
        date=service_date,
        time=slot,
        capacity=capacity,
        passengers=tuple(passengers),
        total_pax=total_pax,
        accepted_pax=current_load,
        is_over_capacity=total_pax > capacity,
    )


def consolidate(bookings: Iterable[Booking], service_date: dt.date, capacity: int) -> List[Trip]:
    """
    Build the trips of `service_date`.

    Args:
        bookings: Any bookings, in any order and for any dates.
        service_date: Operating date to build trips for.
        capacity: Seats per trip.

    Returns:
        Trips in ascending slot order, each with a priority-ordered,
        overflow-annotated manifest.

    Raises:
        InvalidCapacityError: capacity is not a positive integer.
        InvalidBookingError: a booking has no slot/date or a non-positive pax count.
    """
    validate_capacity(capacity)
    bookings = list(bookings)
    for booking in bookings:
        validate_booking(booking)

    groups: Dict[Slot, List[Booking]] = {}
    for booking in bookings:
        if booking.date != service_date:
            continue
        groups.setdefault(booking.time_slot, []).append(booking)

    trips = [
        allocate_trip(service_date, slot, groups[slot], capacity)
        for slot in sorted(groups, key=slot_sort_key)
    ]

    logger.debug(
        "Consolidated %d bookings into %d trips for %s (capacity %d)",
        sum(len(g) for g in groups.values()), len(trips), service_date, capacity,
    )
    return trips
