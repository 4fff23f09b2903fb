"""
Trip schemas.

Trips are recomputed views; these models only shape them for JSON.
"""

import datetime as dt
from pydantic import Field
from typing import List, Optional

from shuttle_backend.app.schemas.common import CamelModel
from shuttle_backend.app.schemas.booking import BookingResponse
from shuttle_backend.app.schemas.dispatch import AssignmentResponse
from shuttle_backend.app.models.shuttle_enums import ShuttleStatus
from shuttle_backend.app.domain.consolidation.models import Booking, Passenger, Trip
from shuttle_backend.app.domain.consolidation.time_slots import format_time_slot, read_time_slot


class PassengerResponse(BookingResponse):
    is_overflow: bool

    @classmethod
    def from_passenger(cls, passenger: Passenger) -> "PassengerResponse":
        return cls(**cls.booking_fields(passenger.booking), is_overflow=passenger.is_overflow)


class TripResponse(CamelModel):
    time: str
    total_pax: int
    accepted_pax: int
    is_over_capacity: bool
    passengers: List[PassengerResponse]

    @classmethod
    def from_domain(cls, trip: Trip) -> "TripResponse":
        return cls(
            time=format_time_slot(trip.time),
            total_pax=trip.total_pax,
            accepted_pax=trip.accepted_pax,
            is_over_capacity=trip.is_over_capacity,
            passengers=[PassengerResponse.from_passenger(p) for p in trip.passengers],
        )


class TripBoardEntry(TripResponse):
    """A trip with what dispatch has decided for it so far."""
    capacity: int
    overflow_pax: int
    assignment: Optional[AssignmentResponse] = None


class TripBoardResponse(CamelModel):
    date: dt.date
    capacity: int
    trips: List[TripBoardEntry]


class BookingPayload(CamelModel):
    """
    Booking as submitted to the stateless consolidation endpoint.

    Fields the consolidator validates itself (seats, slot, date) are loosely
    typed here so that bad values surface as booking errors. Slot labels
    that are not HH:MM are grouped verbatim rather than rejected.
    """
    id: str
    guest_name: str = ""
    guest_phone: str = ""
    pickup_location: str = ""
    destination: Optional[str] = None
    date: Optional[dt.date] = None
    time_slot: Optional[str] = None
    pax_count: int
    status: ShuttleStatus = ShuttleStatus.REGISTERED
    booking_time: dt.datetime
    is_vip: bool = Field(False, alias="isVIP")
    notes: Optional[str] = None
    total_price: Optional[int] = None

    def to_domain(self) -> Booking:
        return Booking(
            id=self.id,
            guest_name=self.guest_name,
            guest_phone=self.guest_phone,
            pickup_location=self.pickup_location,
            date=self.date,
            time_slot=read_time_slot(self.time_slot),
            pax_count=self.pax_count,
            booking_time=self.booking_time,
            status=self.status,
            is_vip=self.is_vip,
            notes=self.notes,
            destination=self.destination,
            total_price=self.total_price,
        )


class ConsolidateRequest(CamelModel):
    bookings: List[BookingPayload]
    date: dt.date
    capacity: int
