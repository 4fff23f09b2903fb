"""
Audit Log Database Model.

Tracks dispatcher actions on bookings and trips.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from shuttle_backend.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model.

    Events logged:
    - BOOKING_CREATED / BOOKING_STATUS_CHANGED
    - TRIP_ASSIGNED
    - TRIP_NOTIFIED
    - VEHICLE_CREATED / DRIVER_CREATED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    action = Column(String(100), nullable=False, index=True)

    # What the action touched, e.g. ("booking", "s1a2b3") or ("trip", "2024-05-01 08:00")
    entity_type = Column(String(50), nullable=False)
    entity_id = Column(String(100), nullable=False, index=True)

    meta_data = Column(JSON, nullable=True)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', entity={self.entity_type}:{self.entity_id})>"
