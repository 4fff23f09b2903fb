"""
Unit tests for time slot parsing and formatting.
"""

import datetime as dt

import pytest

from shuttle_backend.app.core.exceptions import InvalidBookingError
from shuttle_backend.app.domain.consolidation.time_slots import (
    format_time_slot,
    parse_time_slot,
    read_time_slot,
    slot_sort_key,
    trip_key,
)


@pytest.mark.parametrize("label,expected", [
    ("00:00", dt.time(0, 0)),
    ("08:00", dt.time(8, 0)),
    ("13:30", dt.time(13, 30)),
    ("23:59", dt.time(23, 59)),
])
def test_parse_zero_padded_labels(label, expected):
    assert parse_time_slot(label) == expected


@pytest.mark.parametrize("label", ["8:00", "24:00", "08:60", "0800", "08:00:00", "", " 08:00", "08:00\n", "8am"])
def test_malformed_labels_are_rejected(label):
    with pytest.raises(InvalidBookingError) as exc_info:
        parse_time_slot(label, booking_id="s9")

    assert exc_info.value.details == {"booking_id": "s9", "field": "timeSlot"}


def test_time_values_and_none_pass_through():
    assert parse_time_slot(dt.time(9, 15)) == dt.time(9, 15)
    assert parse_time_slot(None) is None


def test_slot_order_matches_label_order():
    labels = ["20:00", "06:00", "13:00", "09:00", "19:00", "07:00"]

    by_time = [format_time_slot(t) for t in sorted(parse_time_slot(label) for label in labels)]

    assert by_time == sorted(labels)


def test_trip_key():
    assert trip_key(dt.date(2024, 5, 1), dt.time(8, 0)) == "2024-05-01 08:00"


def test_lenient_reading_keeps_unknown_labels_verbatim():
    assert read_time_slot("08:00") == dt.time(8, 0)
    assert read_time_slot("8:00") == "8:00"
    assert read_time_slot("08:00\n") == "08:00\n"
    assert read_time_slot("sáng sớm") == "sáng sớm"


@pytest.mark.parametrize("label", [None, "", "   "])
def test_lenient_reading_treats_blank_as_missing(label):
    assert read_time_slot(label) is None


def test_raw_labels_sort_after_clock_times():
    slots = ["8:00", dt.time(14, 0), "10h", dt.time(6, 30)]

    assert sorted(slots, key=slot_sort_key) == [dt.time(6, 30), dt.time(14, 0), "10h", "8:00"]
    assert format_time_slot("8:00") == "8:00"
