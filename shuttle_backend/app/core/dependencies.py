"""
Shared request dependencies for FastAPI routes.
"""

import datetime as dt
from typing import Optional

from fastapi import Path, Query

from shuttle_backend.app.core.config import settings
from shuttle_backend.app.domain.consolidation.time_slots import parse_time_slot


async def time_slot_path(
    time_slot: str = Path(..., description="Departure slot, zero-padded HH:MM")
) -> dt.time:
    """Parse the slot of a trip URL into a time of day."""
    return parse_time_slot(time_slot)


async def capacity_query(
    capacity: Optional[int] = Query(None, description="Seats per trip; defaults to the configured shuttle capacity")
) -> int:
    """
    Seats per trip for this request.

    The value is not range-checked here; the consolidator rejects
    non-positive capacities with its own error code.
    """
    if capacity is None:
        return settings.shuttle_capacity
    return capacity
