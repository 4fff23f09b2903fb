"""
Fleet API Endpoints.

Vehicles and drivers that dispatch can put on shuttle departures.
"""

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from shuttle_backend.app.core.config import settings
from shuttle_backend.app.db.session import get_db
from shuttle_backend.app.models.driver import Driver
from shuttle_backend.app.models.shuttle_enums import VehicleStatus
from shuttle_backend.app.models.vehicle import Vehicle
from shuttle_backend.app.schemas.fleet import (
    DriverCreate,
    DriverListResponse,
    DriverResponse,
    VehicleCreate,
    VehicleListResponse,
    VehicleResponse,
)
from shuttle_backend.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/fleet", tags=["Fleet"])


@router.post("/vehicles", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle_data: VehicleCreate,
    db: AsyncSession = Depends(get_db)
):
    """Register a vehicle. Plates are unique."""
    existing = await db.execute(select(Vehicle).where(Vehicle.plate == vehicle_data.plate))
    if existing.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Vehicle with plate {vehicle_data.plate} already exists"
        )

    vehicle = Vehicle(**vehicle_data.model_dump())
    db.add(vehicle)
    await db.commit()
    await db.refresh(vehicle)

    await log_event(
        db=db,
        action=AuditAction.VEHICLE_CREATED,
        entity_type="vehicle",
        entity_id=vehicle.id,
        metadata={"plate": vehicle.plate, "seats": vehicle.seats}
    )

    return VehicleResponse.model_validate(vehicle)


@router.get("/vehicles", response_model=VehicleListResponse)
async def list_vehicles(
    shuttle_eligible: bool = Query(False, alias="shuttleEligible", description="Only AVAILABLE vehicles big enough for a shuttle run"),
    db: AsyncSession = Depends(get_db)
):
    query = select(Vehicle)
    if shuttle_eligible:
        query = query.where(
            Vehicle.status == VehicleStatus.AVAILABLE,
            Vehicle.seats >= settings.shuttle_min_vehicle_seats,
        )
    result = await db.execute(query.order_by(Vehicle.id))
    vehicles = result.scalars().all()

    return VehicleListResponse(
        vehicles=[VehicleResponse.model_validate(v) for v in vehicles],
        total=len(vehicles),
    )


@router.post("/drivers", response_model=DriverResponse, status_code=status.HTTP_201_CREATED)
async def create_driver(
    driver_data: DriverCreate,
    db: AsyncSession = Depends(get_db)
):
    driver = Driver(**driver_data.model_dump())
    db.add(driver)
    await db.commit()
    await db.refresh(driver)

    await log_event(
        db=db,
        action=AuditAction.DRIVER_CREATED,
        entity_type="driver",
        entity_id=driver.id,
        metadata={"name": driver.name}
    )

    return DriverResponse.model_validate(driver)


@router.get("/drivers", response_model=DriverListResponse)
async def list_drivers(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Driver).order_by(Driver.id))
    drivers = result.scalars().all()

    return DriverListResponse(
        drivers=[DriverResponse.model_validate(d) for d in drivers],
        total=len(drivers),
    )
