"""
Shuttle booking database model.

One row per booking placed by a guest; a booking is never split across trips.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, Date, Time, DateTime, Enum, CheckConstraint
from sqlalchemy.sql import func
from shuttle_backend.app.db.session import Base
from shuttle_backend.app.models.shuttle_enums import ShuttleStatus
from shuttle_backend.app.domain.consolidation.models import Booking


class ShuttleBooking(Base):
    """
    Shuttle booking model.

    `service_date` and `time_slot` identify the departure the guest asked for;
    `booking_time` is the first-come-first-served signal used when seats run out.
    """
    __tablename__ = "shuttle_bookings"
    __table_args__ = (
        CheckConstraint("pax_count > 0", name="ck_shuttle_bookings_pax_positive"),
    )

    id = Column(String(64), primary_key=True)

    # Guest contact
    guest_name = Column(String(255), nullable=False)
    guest_phone = Column(String(50), nullable=False)

    # Itinerary
    route_id = Column(String(50), nullable=True)
    pickup_location = Column(String(500), nullable=False)
    destination = Column(String(255), nullable=True)
    service_date = Column(Date, nullable=False, index=True)
    time_slot = Column(Time, nullable=False, index=True)

    # Seats and price
    pax_count = Column(Integer, nullable=False)
    total_price = Column(Integer, nullable=False)

    # Priority
    is_vip = Column(Boolean, default=False, nullable=False)
    booking_time = Column(DateTime(timezone=True), nullable=False, index=True)

    status = Column(Enum(ShuttleStatus), default=ShuttleStatus.REGISTERED, nullable=False, index=True)
    notes = Column(Text, nullable=True)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def to_domain(self) -> Booking:
        return Booking(
            id=self.id,
            guest_name=self.guest_name,
            guest_phone=self.guest_phone,
            pickup_location=self.pickup_location,
            date=self.service_date,
            time_slot=self.time_slot,
            pax_count=self.pax_count,
            booking_time=self.booking_time,
            status=self.status,
            is_vip=self.is_vip,
            notes=self.notes,
            destination=self.destination,
            total_price=self.total_price,
        )

    def __repr__(self):
        return f"<ShuttleBooking(id='{self.id}', date={self.service_date}, slot={self.time_slot}, pax={self.pax_count})>"
