"""
Trip assignment database model.

Trips themselves are never stored; they are recomputed from bookings on
every read. What dispatch decides for a departure lives here, keyed by
(service_date, time_slot).
"""

from sqlalchemy import Column, Integer, Boolean, Date, Time, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from shuttle_backend.app.db.session import Base


class TripAssignment(Base):
    __tablename__ = "trip_assignments"
    __table_args__ = (
        UniqueConstraint("service_date", "time_slot", name="uq_trip_assignments_departure"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Departure key
    service_date = Column(Date, nullable=False, index=True)
    time_slot = Column(Time, nullable=False)

    # Resources (either may be chosen first)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=True, index=True)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=True, index=True)

    # Passenger notification
    notified = Column(Boolean, default=False, nullable=False)
    notified_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def is_complete(self) -> bool:
        return self.vehicle_id is not None and self.driver_id is not None

    def __repr__(self):
        return f"<TripAssignment(date={self.service_date}, slot={self.time_slot}, vehicle={self.vehicle_id}, driver={self.driver_id})>"
