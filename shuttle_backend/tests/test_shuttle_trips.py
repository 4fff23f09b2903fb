"""
Integration tests for the trip board and the stateless consolidation endpoint.
"""

import pytest


def passenger_ids(trip):
    return [p["id"] for p in trip["passengers"]]


# TEST 1: Trip board over stored bookings
@pytest.mark.asyncio
async def test_trip_board_for_seeded_date(client, seeded):
    response = await client.get("/v1/trips", params={"date": "2024-05-01"})

    assert response.status_code == 200
    data = response.json()
    assert data["date"] == "2024-05-01"
    assert data["capacity"] == 18
    assert [t["time"] for t in data["trips"]] == ["08:00", "10:00"]

    morning = data["trips"][0]
    assert passenger_ids(morning) == ["s2", "s3", "s1", "s5"]
    assert morning["totalPax"] == 21
    assert morning["acceptedPax"] == 16
    assert morning["overflowPax"] == 5
    assert morning["isOverCapacity"] is True
    assert [p["id"] for p in morning["passengers"] if p["isOverflow"]] == ["s5"]
    assert morning["passengers"][0]["isVIP"] is True
    assert morning["assignment"] is None

    late_morning = data["trips"][1]
    assert late_morning["totalPax"] == 1
    assert late_morning["isOverCapacity"] is False
    assert late_morning["passengers"][0]["status"] == "PICKED_UP"


@pytest.mark.asyncio
async def test_trip_board_with_larger_vehicle(client, seeded):
    response = await client.get("/v1/trips", params={"date": "2024-05-01", "capacity": 21})

    morning = response.json()["trips"][0]
    assert morning["acceptedPax"] == 21
    assert morning["isOverCapacity"] is False
    assert not any(p["isOverflow"] for p in morning["passengers"])


@pytest.mark.asyncio
async def test_trip_board_for_empty_date(client, seeded):
    response = await client.get("/v1/trips", params={"date": "2024-05-02"})

    assert response.status_code == 200
    assert response.json()["trips"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize("capacity", [0, -5])
async def test_trip_board_rejects_non_positive_capacity(client, seeded, capacity):
    response = await client.get("/v1/trips", params={"date": "2024-05-01", "capacity": capacity})

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_CAPACITY_001"


@pytest.mark.asyncio
async def test_new_booking_shows_up_on_next_read(client, seeded):
    await client.post("/v1/bookings", json={
        "guestName": "Trần Văn D",
        "guestPhone": "0933.444.555",
        "pickupLocation": "Trấn Biên",
        "date": "2024-05-01",
        "timeSlot": "08:00",
        "paxCount": 1,
    })

    response = await client.get("/v1/trips", params={"date": "2024-05-01"})

    morning = response.json()["trips"][0]
    assert morning["totalPax"] == 22
    # Booked last but one seat still fits after the 5-seat overflow
    assert morning["acceptedPax"] == 17
    assert morning["passengers"][-1]["isOverflow"] is False


# TEST 2: Stateless consolidation
def representative_request(capacity=18):
    return {
        "date": "2024-05-01",
        "capacity": capacity,
        "bookings": [
            {"id": "s1", "guestName": "Lan", "guestPhone": "1", "pickupLocation": "Trấn Biên",
             "date": "2024-05-01", "timeSlot": "08:00", "paxCount": 2,
             "bookingTime": "2024-04-29T18:00:00Z", "isVIP": False, "status": "CONFIRMED"},
            {"id": "s2", "guestName": "Minh", "guestPhone": "2", "pickupLocation": "Bình Phước",
             "date": "2024-05-01", "timeSlot": "08:00", "paxCount": 4,
             "bookingTime": "2024-04-30T06:00:00Z", "isVIP": True},
            {"id": "s3", "guestName": "Sale", "guestPhone": "3", "pickupLocation": "Trấn Biên",
             "date": "2024-05-01", "timeSlot": "08:00", "paxCount": 10,
             "bookingTime": "2024-04-28T18:00:00Z", "isVIP": False},
            {"id": "s4", "guestName": "C", "guestPhone": "4", "pickupLocation": "Bình Phước",
             "date": "2024-05-01", "timeSlot": "10:00", "paxCount": 1,
             "bookingTime": "2024-04-29T18:00:00Z", "isVIP": False},
            {"id": "s5", "guestName": "Tùng", "guestPhone": "5", "pickupLocation": "Trấn Biên",
             "date": "2024-05-01", "timeSlot": "08:00", "paxCount": 5,
             "bookingTime": "2024-04-30T18:00:00Z", "isVIP": False},
            {"id": "s6", "guestName": "Tomorrow", "guestPhone": "6", "pickupLocation": "Trấn Biên",
             "date": "2024-05-02", "timeSlot": "08:00", "paxCount": 3,
             "bookingTime": "2024-04-30T18:00:00Z", "isVIP": False},
        ],
    }


@pytest.mark.asyncio
async def test_consolidate_endpoint_contract(client):
    response = await client.post("/v1/trips/consolidate", json=representative_request())

    assert response.status_code == 200
    trips = response.json()
    assert [t["time"] for t in trips] == ["08:00", "10:00"]

    morning = trips[0]
    assert set(morning) == {"time", "totalPax", "acceptedPax", "isOverCapacity", "passengers"}
    assert passenger_ids(morning) == ["s2", "s3", "s1", "s5"]
    assert (morning["totalPax"], morning["acceptedPax"], morning["isOverCapacity"]) == (21, 16, True)
    assert [p["isOverflow"] for p in morning["passengers"]] == [False, False, False, True]

    first = morning["passengers"][0]
    for field in ("id", "guestName", "guestPhone", "pickupLocation", "date", "timeSlot",
                  "paxCount", "status", "bookingTime", "isVIP", "isOverflow"):
        assert field in first
    assert morning["passengers"][2]["status"] == "CONFIRMED"


@pytest.mark.asyncio
async def test_consolidate_endpoint_is_deterministic(client):
    first = await client.post("/v1/trips/consolidate", json=representative_request())
    second = await client.post("/v1/trips/consolidate", json=representative_request())

    assert first.content == second.content


@pytest.mark.asyncio
@pytest.mark.parametrize("capacity", [0, -1])
async def test_consolidate_endpoint_rejects_capacity(client, capacity):
    response = await client.post("/v1/trips/consolidate", json=representative_request(capacity))

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_CAPACITY_001"


@pytest.mark.asyncio
@pytest.mark.parametrize("field,value", [
    ("paxCount", 0),
    ("paxCount", -3),
    ("timeSlot", None),
    ("timeSlot", "  "),
    ("date", None),
])
async def test_consolidate_endpoint_rejects_bad_booking(client, field, value):
    request = representative_request()
    request["bookings"][1][field] = value

    response = await client.post("/v1/trips/consolidate", json=request)

    assert response.status_code == 422
    data = response.json()
    assert data["error_code"] == "ERR_BOOKING_001"
    assert data["details"]["booking_id"] == "s2"


@pytest.mark.asyncio
async def test_unpadded_slot_label_forms_its_own_trip(client):
    request = representative_request()
    request["bookings"][1]["timeSlot"] = "8:00"

    response = await client.post("/v1/trips/consolidate", json=request)

    assert response.status_code == 200
    trips = response.json()
    assert [t["time"] for t in trips] == ["08:00", "10:00", "8:00"]
    assert passenger_ids(trips[0]) == ["s3", "s1", "s5"]
    assert (trips[0]["totalPax"], trips[0]["isOverCapacity"]) == (17, False)
    assert passenger_ids(trips[2]) == ["s2"]
    assert trips[2]["passengers"][0]["timeSlot"] == "8:00"
