"""
Time slot labels.

Slots travel as zero-padded 24-hour "HH:MM" strings at the API boundary and
as `datetime.time` everywhere else, so ordering never depends on string
formatting.

Bookings handed to the stateless consolidation endpoint may carry labels
that are not "HH:MM" (e.g. "8:00"). Those are kept verbatim: each distinct
label forms its own group, ordered after every well-formed slot.
"""

import datetime as dt
import re
from typing import Optional, Union

from shuttle_backend.app.core.exceptions import InvalidBookingError

SLOT_PATTERN = re.compile(r"(?:[01]\d|2[0-3]):[0-5]\d")

Slot = Union[dt.time, str]


def is_slot_label(value: str) -> bool:
    return SLOT_PATTERN.fullmatch(value) is not None


def _to_time(label: str) -> dt.time:
    hours, minutes = label.split(":")
    return dt.time(int(hours), int(minutes))


def parse_time_slot(value: Union[str, dt.time, None], booking_id: str = None) -> Optional[dt.time]:
    """
    Parse an "HH:MM" label. `None` passes through so that missing slots are
    reported by booking validation with the booking they belong to.
    """
    if value is None or isinstance(value, dt.time):
        return value
    if not isinstance(value, str) or not is_slot_label(value):
        raise InvalidBookingError(
            f"Time slot must be a zero-padded HH:MM label, got {value!r}",
            booking_id=booking_id,
            field="timeSlot",
        )
    return _to_time(value)


def read_time_slot(value: Union[str, dt.time, None]) -> Optional[Slot]:
    """
    Lenient reading for submitted bookings.

    Well-formed labels become `datetime.time`; any other non-blank label is
    returned unchanged and grouped by exact string. Blank means missing.
    """
    if value is None or isinstance(value, dt.time):
        return value
    if not value.strip():
        return None
    if is_slot_label(value):
        return _to_time(value)
    return value


def slot_sort_key(slot: Slot):
    """Well-formed slots by time of day, then raw labels by string."""
    if isinstance(slot, dt.time):
        return (0, slot, "")
    return (1, dt.time.min, slot)


def format_time_slot(value: Slot) -> str:
    if isinstance(value, str):
        return value
    return value.strftime("%H:%M")


def trip_key(service_date: dt.date, slot: Slot) -> str:
    """Human readable departure key, e.g. '2024-05-01 08:00'."""
    return f"{service_date.isoformat()} {format_time_slot(slot)}"
