"""
Shuttle booking schemas.

Request and response models for booking intake and the dispatcher lifecycle.
"""

import datetime as dt
from pydantic import Field, field_validator, model_validator
from typing import List, Optional

from shuttle_backend.app.schemas.common import CamelModel
from shuttle_backend.app.models.shuttle_enums import ShuttleStatus
from shuttle_backend.app.domain.consolidation.models import Booking
from shuttle_backend.app.domain.consolidation.time_slots import format_time_slot, is_slot_label


class BookingCreate(CamelModel):
    """
    Schema for placing a shuttle booking.

    Either `pickup_location` is given directly, or `route_id` selects one of
    the configured lines and `specific_location` refines the pickup point.
    """
    guest_name: str = Field(..., min_length=1, max_length=255)
    guest_phone: str = Field(..., min_length=1, max_length=50)
    pickup_location: Optional[str] = Field(None, max_length=500)
    route_id: Optional[str] = Field(None, max_length=50)
    specific_location: Optional[str] = Field(None, max_length=255)
    date: dt.date
    time_slot: str = Field(..., description="Zero-padded 24h departure, e.g. 08:00")
    pax_count: int = Field(..., gt=0, description="Seats requested by this booking")
    is_vip: bool = Field(False, alias="isVIP")
    notes: Optional[str] = None

    @field_validator("time_slot")
    @classmethod
    def check_time_slot(cls, value: str) -> str:
        if not is_slot_label(value):
            raise ValueError("time slot must be a zero-padded HH:MM label")
        return value

    @model_validator(mode="after")
    def check_pickup(self):
        if not self.pickup_location and not self.route_id:
            raise ValueError("either pickupLocation or routeId is required")
        return self


class BookingStatusUpdate(CamelModel):
    status: ShuttleStatus


class BookingResponse(CamelModel):
    """Booking as shown to dispatchers and inside trip manifests."""
    id: str
    guest_name: str
    guest_phone: str
    pickup_location: str
    destination: Optional[str] = None
    date: dt.date
    time_slot: str
    pax_count: int
    status: ShuttleStatus
    booking_time: dt.datetime
    is_vip: bool = Field(alias="isVIP")
    notes: Optional[str] = None
    total_price: Optional[int] = None

    @classmethod
    def booking_fields(cls, booking: Booking) -> dict:
        return dict(
            id=booking.id,
            guest_name=booking.guest_name,
            guest_phone=booking.guest_phone,
            pickup_location=booking.pickup_location,
            destination=booking.destination,
            date=booking.date,
            time_slot=format_time_slot(booking.time_slot),
            pax_count=booking.pax_count,
            status=booking.status,
            booking_time=booking.booking_time,
            is_vip=booking.is_vip,
            notes=booking.notes,
            total_price=booking.total_price,
        )

    @classmethod
    def from_domain(cls, booking: Booking) -> "BookingResponse":
        return cls(**cls.booking_fields(booking))


class BookingListResponse(CamelModel):
    bookings: List[BookingResponse]
    total: int
