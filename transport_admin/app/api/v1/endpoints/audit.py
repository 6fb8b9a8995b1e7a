"""
Audit Trail API Endpoints.

Admin-only read access to the audit log written by every create and
status change.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from transport_admin.app.db.session import get_db
from transport_admin.app.core.guards import require_admin
from transport_admin.app.schemas.audit import AuditLogResponse, AuditTrailResponse
from transport_admin.app.schemas.common import ApiResponse
from transport_admin.app.services.audit import get_audit_trail

router = APIRouter(prefix="/admin", tags=["Admin - Audit"])


@router.get("/audit-logs", response_model=ApiResponse[AuditTrailResponse])
async def get_audit_logs(
    entity_type: Optional[str] = Query(None, description="transport_request, trip or payment"),
    entity_id: Optional[str] = Query(None, description="Filter by entity id"),
    action: Optional[str] = Query(None, description="Filter by action type"),
    limit: int = Query(100, ge=1, le=500, description="Maximum records to return"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Audit trail, most recent first."""
    logs = await get_audit_trail(
        db=db,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        limit=limit
    )

    return ApiResponse(data=AuditTrailResponse(
        logs=[AuditLogResponse.model_validate(log) for log in logs],
        total=len(logs)
    ))
