"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from shuttle_backend.app.api.v1.endpoints import bookings, trips, dispatch, fleet

router = APIRouter()

# Booking intake and lifecycle
router.include_router(bookings.router)

# Consolidated trips (recomputed on every read)
router.include_router(trips.router)

# Vehicle/driver assignment and passenger notification
router.include_router(dispatch.router)

# Vehicle and driver registry
router.include_router(fleet.router)
