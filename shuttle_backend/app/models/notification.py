"""
Notification database model.

Outbox of pickup SMS messages sent to passengers of a dispatched trip.
"""

from sqlalchemy import Column, Integer, String, Text, Date, Time, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from shuttle_backend.app.db.session import Base
import enum


class NotificationStatus(str, enum.Enum):
    SENT = "SENT"
    FAILED = "FAILED"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Recipient
    booking_id = Column(String(64), ForeignKey("shuttle_bookings.id"), nullable=False, index=True)
    phone = Column(String(50), nullable=False)

    # Departure the message is about
    service_date = Column(Date, nullable=False, index=True)
    time_slot = Column(Time, nullable=False)

    message = Column(Text, nullable=False)
    status = Column(Enum(NotificationStatus), nullable=False, index=True)
    error = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Notification(id={self.id}, booking='{self.booking_id}', status='{self.status.value}')>"
