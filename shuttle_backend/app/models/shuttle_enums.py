"""
Shuttle-related enumerations.
"""

import enum


class ShuttleStatus(str, enum.Enum):
    """Passenger booking lifecycle, moved forward by dispatchers only."""
    REGISTERED = "REGISTERED"  # Booked, not yet called
    CONFIRMED = "CONFIRMED"  # Dispatcher called the guest
    PICKED_UP = "PICKED_UP"  # Guest boarded
    NO_SHOW = "NO_SHOW"  # Cancelled or absent at pickup


class VehicleType(str, enum.Enum):
    SEDAN = "SEDAN"
    SUV = "SUV"
    VAN = "VAN"
    LUXURY = "LUXURY"


class VehicleStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    IN_USE = "IN_USE"
    MAINTENANCE = "MAINTENANCE"


class DriverStatus(str, enum.Enum):
    READY = "READY"
    DRIVING = "DRIVING"
    OFF_DUTY = "OFF_DUTY"
