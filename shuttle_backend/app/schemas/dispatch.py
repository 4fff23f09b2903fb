"""
Dispatch schemas: trip assignment and passenger notification.
"""

import datetime as dt
from typing import Optional

from shuttle_backend.app.schemas.common import CamelModel
from shuttle_backend.app.domain.consolidation.time_slots import format_time_slot


class AssignmentUpdate(CamelModel):
    """Fields left out keep their current value."""
    vehicle_id: Optional[int] = None
    driver_id: Optional[int] = None


class AssignmentResponse(CamelModel):
    date: dt.date
    time_slot: str
    vehicle_id: Optional[int]
    driver_id: Optional[int]
    notified: bool
    notified_at: Optional[dt.datetime] = None

    @classmethod
    def from_model(cls, assignment) -> "AssignmentResponse":
        return cls(
            date=assignment.service_date,
            time_slot=format_time_slot(assignment.time_slot),
            vehicle_id=assignment.vehicle_id,
            driver_id=assignment.driver_id,
            notified=assignment.notified,
            notified_at=assignment.notified_at,
        )


class NotifyResponse(CamelModel):
    time: str
    accepted_pax: int
    recipients: int
    failed: int
    notified: bool
