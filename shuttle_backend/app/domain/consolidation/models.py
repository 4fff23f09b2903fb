"""
Value objects for shuttle trip consolidation.

Plain immutable records; the consolidator never sees ORM rows, so callers
convert whatever they hold (database rows, request payloads) into `Booking`.
"""

import datetime as dt
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from shuttle_backend.app.models.shuttle_enums import ShuttleStatus


@dataclass(frozen=True)
class Booking:
    id: str
    guest_name: str
    guest_phone: str
    pickup_location: str
    date: Optional[dt.date]
    time_slot: Optional[Union[dt.time, str]]
    pax_count: int
    booking_time: dt.datetime
    status: ShuttleStatus = ShuttleStatus.REGISTERED
    is_vip: bool = False
    notes: Optional[str] = None
    destination: Optional[str] = None
    total_price: Optional[int] = None


@dataclass(frozen=True)
class Passenger:
    """A booking placed on a trip manifest."""
    booking: Booking
    is_overflow: bool


@dataclass(frozen=True)
class Trip:
    """
    One shuttle departure: every booking of a date that shares a time slot.

    `passengers` is in priority order. `total_pax` counts every seat asked
    for, `accepted_pax` only the seats that fit within `capacity`.
    """
    date: dt.date
    time: Union[dt.time, str]
    capacity: int
    passengers: Tuple[Passenger, ...]
    total_pax: int
    accepted_pax: int
    is_over_capacity: bool

    @property
    def overflow_pax(self) -> int:
        return self.total_pax - self.accepted_pax

    @property
    def accepted(self) -> Tuple[Passenger, ...]:
        return tuple(p for p in self.passengers if not p.is_overflow)

    @property
    def overflowed(self) -> Tuple[Passenger, ...]:
        return tuple(p for p in self.passengers if p.is_overflow)
