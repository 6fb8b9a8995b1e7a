"""
Transport Request API Endpoints.

Companies submit and follow their own requests; admins review them,
change their status and turn them into trips.
"""

from fastapi import APIRouter, Depends, status, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from transport_admin.app.db.session import get_db
from transport_admin.app.core.guards import require_role, scope_for, OwnershipGuard
from transport_admin.app.models.enums import UserRole
from transport_admin.app.models.transport_request_enums import TransportRequestStatus, Urgency
from transport_admin.app.schemas.common import ApiResponse
from transport_admin.app.schemas.transport_request import (
    TransportRequestCreate, TransportRequestStatusUpdate, AssignTripRequest,
    TransportRequestResponse, TransportRequestStats
)
from transport_admin.app.services.transport_request_service import TransportRequestService

router = APIRouter(prefix="/company", tags=["Transport Requests"])
ownership_guard = OwnershipGuard()


# --- Company ---

@router.post(
    "/transport-requests",
    response_model=ApiResponse[TransportRequestResponse],
    status_code=status.HTTP_201_CREATED
)
async def create_transport_request(
    request_data: TransportRequestCreate,
    current_user: dict = Depends(require_role([UserRole.COMPANY])),
    db: AsyncSession = Depends(get_db)
):
    """
    Submit a transport request (Company only).

    The estimated cost is computed from quantity, unit, urgency, vehicle
    type and handling requirements, and stored with the request.
    """
    scope = scope_for(current_user)
    transport_request = await TransportRequestService.create(db, scope.owner_id, request_data, current_user)
    return ApiResponse(
        data=TransportRequestResponse.model_validate(transport_request),
        message="Transport request created successfully"
    )


@router.get("/transport-requests", response_model=ApiResponse[List[TransportRequestResponse]])
async def list_company_transport_requests(
    current_user: dict = Depends(require_role([UserRole.COMPANY])),
    db: AsyncSession = Depends(get_db)
):
    """List the calling company's requests, newest first."""
    scope = scope_for(current_user)
    requests = await TransportRequestService.list_by_company(db, scope.owner_id)
    return ApiResponse(data=[TransportRequestResponse.model_validate(r) for r in requests])


@router.get("/transport-requests/{request_id}", response_model=ApiResponse[TransportRequestResponse])
async def get_company_transport_request(
    request_id: int = Path(..., description="Transport Request ID"),
    current_user: dict = Depends(require_role([UserRole.COMPANY])),
    db: AsyncSession = Depends(get_db)
):
    scope = scope_for(current_user)
    transport_request = await TransportRequestService.get_by_id(db, request_id)
    ownership_guard.enforce(scope.owns_transport_request(transport_request), "transport request")
    return ApiResponse(data=TransportRequestResponse.model_validate(transport_request))


# --- Admin ---

@router.get("/admin/transport-requests", response_model=ApiResponse[List[TransportRequestResponse]])
async def list_all_transport_requests(
    status_filter: Optional[TransportRequestStatus] = Query(None, alias="status"),
    urgency: Optional[Urgency] = Query(None),
    company_id: Optional[int] = Query(None),
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    """List every request (Admin only), optionally filtered."""
    requests = await TransportRequestService.list_all(db, status_filter, urgency, company_id)
    return ApiResponse(data=[TransportRequestResponse.model_validate(r) for r in requests])


@router.get("/admin/transport-requests-stats", response_model=ApiResponse[TransportRequestStats])
async def transport_request_stats(
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    return ApiResponse(data=await TransportRequestService.stats(db))


@router.get("/admin/transport-requests/{request_id}", response_model=ApiResponse[TransportRequestResponse])
async def get_transport_request(
    request_id: int = Path(..., description="Transport Request ID"),
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    transport_request = await TransportRequestService.get_by_id(db, request_id)
    return ApiResponse(data=TransportRequestResponse.model_validate(transport_request))


@router.put("/admin/transport-requests/{request_id}/status", response_model=ApiResponse[TransportRequestResponse])
async def update_transport_request_status(
    update: TransportRequestStatusUpdate,
    request_id: int = Path(..., description="Transport Request ID"),
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    """
    Approve, reject or otherwise move a request (Admin only).

    Illegal moves are rejected unless `force` is set.
    """
    transport_request = await TransportRequestService.update_status(
        db,
        request_id,
        update.status,
        admin_notes=update.admin_notes,
        assigned_trip_id=update.assigned_trip_id,
        actor=current_user,
        force=update.force,
    )
    return ApiResponse(
        data=TransportRequestResponse.model_validate(transport_request),
        message="Transport request status updated successfully"
    )


@router.post(
    "/admin/transport-requests/{request_id}/assign-trip",
    response_model=ApiResponse[TransportRequestResponse],
    status_code=status.HTTP_201_CREATED
)
async def assign_trip_to_transport_request(
    trip_data: AssignTripRequest,
    request_id: int = Path(..., description="Transport Request ID"),
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a trip from a request and link it (Admin only).

    Runs as one transaction: a pending request is approved, the trip is
    created and the request moves to assigned, or nothing changes.
    """
    transport_request = await TransportRequestService.assign_trip(db, request_id, trip_data, current_user)
    return ApiResponse(
        data=TransportRequestResponse.model_validate(transport_request),
        message="Trip created and assigned successfully"
    )
