"""
Audit logging service for tracking workflow events.

Audit rows are added to the caller's unit of work and committed (or
rolled back) together with the change they describe.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from transport_admin.app.models.audit_log import AuditLog


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    TRANSPORT_REQUEST_CREATED = "TRANSPORT_REQUEST_CREATED"
    TRANSPORT_REQUEST_STATUS_CHANGED = "TRANSPORT_REQUEST_STATUS_CHANGED"
    TRIP_ASSIGNED = "TRIP_ASSIGNED"

    TRIP_CREATED = "TRIP_CREATED"
    TRIP_UPDATED = "TRIP_UPDATED"
    TRIP_STATUS_CHANGED = "TRIP_STATUS_CHANGED"
    TRIP_DELETED = "TRIP_DELETED"

    PAYMENT_CREATED = "PAYMENT_CREATED"
    PAYMENT_STATUS_CHANGED = "PAYMENT_STATUS_CHANGED"
    PAYMENT_DELETED = "PAYMENT_DELETED"

    # Admin bypassed a transition table
    STATUS_FORCED = "STATUS_FORCED"


async def log_event(
    db: AsyncSession,
    action: str,
    entity_type: str,
    entity_id: Any,
    actor: Optional[Dict[str, Any]] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Add an audit entry to the current transaction.

    Args:
        db: Database session (the caller commits)
        action: Action being performed (use AuditAction constants)
        entity_type: "transport_request", "trip" or "payment"
        entity_id: Primary key of the affected row
        actor: Token payload of the principal, None for system actions
        metadata: Additional context as JSON

    Returns:
        Created AuditLog instance
    """
    audit_log = AuditLog(
        actor_id=actor.get("user_id") if actor else None,
        actor_role=actor.get("role") if actor else None,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id),
        meta_data=metadata
    )

    db.add(audit_log)
    await db.flush()

    return audit_log


async def get_audit_trail(
    db: AsyncSession,
    entity_type: Optional[str] = None,
    entity_id: Any = None,
    action: Optional[str] = None,
    limit: int = 100
) -> list[AuditLog]:
    """
    Retrieve audit trail with optional filtering, most recent first.
    """
    query = select(AuditLog).order_by(desc(AuditLog.timestamp), desc(AuditLog.id))

    if entity_type:
        query = query.where(AuditLog.entity_type == entity_type)

    if entity_id is not None:
        query = query.where(AuditLog.entity_id == str(entity_id))

    if action:
        query = query.where(AuditLog.action == action)

    query = query.limit(limit)

    result = await db.execute(query)
    return result.scalars().all()
