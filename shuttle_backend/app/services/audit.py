"""
Audit logging service for dispatcher actions.

Provides a single place to record who-did-what on bookings and trips.
"""

from typing import Optional, Dict, Any, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from shuttle_backend.app.models.audit_log import AuditLog


class AuditAction:
    """Standardized audit action constants."""
    BOOKING_CREATED = "BOOKING_CREATED"
    BOOKING_STATUS_CHANGED = "BOOKING_STATUS_CHANGED"

    TRIP_ASSIGNED = "TRIP_ASSIGNED"
    TRIP_NOTIFIED = "TRIP_NOTIFIED"

    VEHICLE_CREATED = "VEHICLE_CREATED"
    DRIVER_CREATED = "DRIVER_CREATED"


async def log_event(
    db: AsyncSession,
    action: str,
    entity_type: str,
    entity_id: str,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """
    Record an audit event and commit it.

    Args:
        db: Database session
        action: Action being performed (use AuditAction constants)
        entity_type: Kind of object acted upon ("booking", "trip", ...)
        entity_id: Identifier of that object
        metadata: Additional context as JSON

    Returns:
        Created AuditLog instance
    """
    audit_log = AuditLog(
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id),
        meta_data=metadata,
    )

    db.add(audit_log)
    await db.commit()
    await db.refresh(audit_log)

    return audit_log


async def get_entity_history(
    db: AsyncSession,
    entity_type: str,
    entity_id: str,
    limit: int = 100,
) -> List[AuditLog]:
    """Most recent audit events for one booking or trip."""
    result = await db.execute(
        select(AuditLog)
        .where(AuditLog.entity_type == entity_type, AuditLog.entity_id == str(entity_id))
        .order_by(desc(AuditLog.timestamp), desc(AuditLog.id))
        .limit(limit)
    )
    return list(result.scalars().all())
