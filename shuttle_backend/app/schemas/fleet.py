"""
Vehicle and driver schemas.
"""

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime
from typing import List, Optional

from shuttle_backend.app.schemas.common import CamelModel
from shuttle_backend.app.models.shuttle_enums import VehicleType, VehicleStatus, DriverStatus


class VehicleCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    plate: str = Field(..., min_length=1, max_length=50, description="Unique registration plate")
    vehicle_type: VehicleType
    seats: int = Field(..., gt=0)
    status: VehicleStatus = VehicleStatus.AVAILABLE


class VehicleResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    name: str
    plate: str
    vehicle_type: VehicleType
    seats: int
    status: VehicleStatus
    created_at: datetime


class VehicleListResponse(CamelModel):
    vehicles: List[VehicleResponse]
    total: int


class DriverCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=50)
    license_class: Optional[str] = Field(None, max_length=10)
    status: DriverStatus = DriverStatus.READY


class DriverResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    name: str
    phone: str
    license_class: Optional[str]
    status: DriverStatus
    created_at: datetime


class DriverListResponse(CamelModel):
    drivers: List[DriverResponse]
    total: int
