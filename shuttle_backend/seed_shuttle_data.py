"""
Database seeding script for demo shuttle data.

Creates a small fleet, three drivers and the morning bookings of one
operating date (an overbooked 08:00 departure and a light 10:00 one).
Run this script after database is set up but before first use.
"""

import asyncio
import datetime as dt
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shuttle_backend.app.core.config import settings
from shuttle_backend.app.db.session import AsyncSessionLocal, engine, Base
from shuttle_backend.app.models.driver import Driver
from shuttle_backend.app.models.shuttle_booking import ShuttleBooking
from shuttle_backend.app.models.shuttle_enums import DriverStatus, ShuttleStatus, VehicleStatus, VehicleType
from shuttle_backend.app.models.vehicle import Vehicle
# Registered so create_all builds every table
from shuttle_backend.app.models.trip_assignment import TripAssignment
from shuttle_backend.app.models.notification import Notification
from shuttle_backend.app.models.audit_log import AuditLog

HOUR = dt.timedelta(hours=1)

VEHICLES = [
    dict(name="VinFast Lux A2.0", plate="30H-123.45", vehicle_type=VehicleType.SEDAN, seats=5, status=VehicleStatus.AVAILABLE),
    dict(name="Toyota Fortuner", plate="29A-987.65", vehicle_type=VehicleType.SUV, seats=7, status=VehicleStatus.IN_USE),
    dict(name="Ford Transit", plate="29D-555.88", vehicle_type=VehicleType.VAN, seats=16, status=VehicleStatus.AVAILABLE),
    dict(name="Hyundai Solati", plate="51B-246.80", vehicle_type=VehicleType.VAN, seats=18, status=VehicleStatus.AVAILABLE),
    dict(name="Mercedes S450", plate="30K-999.99", vehicle_type=VehicleType.LUXURY, seats=5, status=VehicleStatus.MAINTENANCE),
]

DRIVERS = [
    dict(name="Phạm Văn Tài", phone="0901.234.567", license_class="D", status=DriverStatus.READY),
    dict(name="Lê Thanh Xế", phone="0909.888.777", license_class="E", status=DriverStatus.DRIVING),
    dict(name="Trần Văn Mới", phone="0912.333.444", license_class="B2", status=DriverStatus.OFF_DUTY),
]

# (id, guest, phone, pickup, slot, pax, status, booked_before_now, vip)
BOOKINGS = [
    ("s1", "Nguyễn Thị Lan", "0912.345.678", "Trấn Biên (Cổng chào)", dt.time(8, 0), 2, ShuttleStatus.CONFIRMED, 24 * HOUR, False),
    ("s2", "Phạm Minh", "0987.654.321", "Bình Phước (Ngã 4)", dt.time(8, 0), 4, ShuttleStatus.REGISTERED, 12 * HOUR, True),
    ("s3", "Nhóm Sale BĐS", "0909.000.111", "Trấn Biên", dt.time(8, 0), 10, ShuttleStatus.REGISTERED, 48 * HOUR, False),
    ("s4", "Lê Văn C", "0911.222.333", "Bình Phước", dt.time(10, 0), 1, ShuttleStatus.PICKED_UP, 24 * HOUR, False),
    ("s5", "Hoàng Tùng", "0999.888.777", "Trấn Biên", dt.time(8, 0), 5, ShuttleStatus.REGISTERED, dt.timedelta(0), False),
]


async def seed_demo_data(db: AsyncSession, service_date: dt.date, now: dt.datetime) -> dict:
    """
    Insert the demo fleet and bookings unless bookings already exist.

    Returns:
        Counts of inserted rows per kind (all zero when skipped).
    """
    existing = await db.execute(select(ShuttleBooking.id).limit(1))
    if existing.scalar_one_or_none():
        return {"vehicles": 0, "drivers": 0, "bookings": 0}

    db.add_all(Vehicle(**v) for v in VEHICLES)
    db.add_all(Driver(**d) for d in DRIVERS)
    db.add_all(
        ShuttleBooking(
            id=booking_id,
            guest_name=guest,
            guest_phone=phone,
            pickup_location=pickup,
            service_date=service_date,
            time_slot=slot,
            pax_count=pax,
            total_price=pax * settings.price_per_seat,
            status=status,
            booking_time=now - booked_before,
            is_vip=vip,
        )
        for booking_id, guest, phone, pickup, slot, pax, status, booked_before, vip in BOOKINGS
    )
    await db.commit()

    return {"vehicles": len(VEHICLES), "drivers": len(DRIVERS), "bookings": len(BOOKINGS)}


async def main():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    now = dt.datetime.now(dt.timezone.utc)
    async with AsyncSessionLocal() as db:
        print("Seeding shuttle demo data...")
        counts = await seed_demo_data(db, now.date(), now)

    if not any(counts.values()):
        print("Bookings already exist, skipping seeding")
        return

    print(f"Created {counts['vehicles']} vehicles, {counts['drivers']} drivers, {counts['bookings']} bookings")
    print(f"Open /v1/trips?date={now.date().isoformat()} to see the consolidated departures")


if __name__ == "__main__":
    asyncio.run(main())
