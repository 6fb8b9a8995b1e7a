"""
Trip API Endpoints.

Trip creation, field updates and the status lifecycle. Every read is
scoped to the caller's role.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, status, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from transport_admin.app.db.session import get_db
from transport_admin.app.core.guards import (
    require_role, scope_for, get_owner_scope, ensure_force_allowed, OwnerScope, OwnershipGuard
)
from transport_admin.app.models.enums import UserRole
from transport_admin.app.models.trip_enums import TripStatus
from transport_admin.app.schemas.common import ApiResponse
from transport_admin.app.schemas.trip import (
    TripCreate, TripUpdate, TripStatusUpdate, TripResponse, TripListResponse, TripStats
)
from transport_admin.app.services.trip_service import TripService

router = APIRouter(prefix="/trips", tags=["Trips"])
ownership_guard = OwnershipGuard()

TRIP_EDITORS = [UserRole.ADMIN, UserRole.MANAGER]


@router.get("", response_model=ApiResponse[TripListResponse])
async def list_trips(
    status_filter: Optional[TripStatus] = Query(None, alias="status"),
    company_id: Optional[int] = Query(None),
    vehicle_owner_id: Optional[int] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncSession = Depends(get_db)
):
    """
    List trips visible to the caller.

    Admins see every trip; other roles only see trips they are a party to.
    """
    trips, total = await TripService.list_trips(
        db, scope,
        status=status_filter,
        company_id=company_id,
        vehicle_owner_id=vehicle_owner_id,
        date_from=date_from,
        date_to=date_to,
        page=page,
        limit=limit,
    )
    return ApiResponse(data=TripListResponse(
        trips=[TripResponse.model_validate(t) for t in trips],
        total=total,
        page=page,
        limit=limit,
    ))


@router.post("", response_model=ApiResponse[TripResponse], status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    current_user: dict = Depends(require_role(TRIP_EDITORS)),
    db: AsyncSession = Depends(get_db)
):
    """Create a trip in pending status (Admin, Manager)."""
    trip = await TripService.create(db, trip_data.model_dump(), current_user)
    return ApiResponse(data=TripResponse.model_validate(trip), message="Trip created successfully")


@router.get("/stats", response_model=ApiResponse[TripStats])
async def trip_stats(
    current_user: dict = Depends(require_role(TRIP_EDITORS)),
    db: AsyncSession = Depends(get_db)
):
    return ApiResponse(data=await TripService.stats(db, scope_for(current_user)))


@router.get("/{trip_id}", response_model=ApiResponse[TripResponse])
async def get_trip(
    trip_id: int = Path(..., description="Trip ID"),
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncSession = Depends(get_db)
):
    trip = await TripService.get_by_id(db, trip_id)
    ownership_guard.enforce(scope.owns_trip(trip), "trip")
    return ApiResponse(data=TripResponse.model_validate(trip))


@router.put("/{trip_id}", response_model=ApiResponse[TripResponse])
async def update_trip(
    update: TripUpdate,
    trip_id: int = Path(..., description="Trip ID"),
    current_user: dict = Depends(require_role(TRIP_EDITORS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Patch trip fields (Admin, Manager).

    Status changes go through PATCH /trips/{id}/status.
    """
    trip = await TripService.get_by_id(db, trip_id)
    ownership_guard.enforce(scope_for(current_user).owns_trip(trip), "trip")

    trip = await TripService.update(db, trip_id, update.model_dump(exclude_unset=True), current_user)
    return ApiResponse(data=TripResponse.model_validate(trip), message="Trip updated successfully")


@router.patch("/{trip_id}/status", response_model=ApiResponse[TripResponse])
async def update_trip_status(
    update: TripStatusUpdate,
    trip_id: int = Path(..., description="Trip ID"),
    current_user: dict = Depends(require_role([UserRole.ADMIN, UserRole.MANAGER, UserRole.DRIVER])),
    db: AsyncSession = Depends(get_db)
):
    """
    Advance a trip (Admin, Manager, Driver on their own trip).

    in_transit stamps start_date and completed stamps actual_delivery_date.
    """
    ensure_force_allowed(current_user, update.force)

    trip = await TripService.get_by_id(db, trip_id)
    ownership_guard.enforce(scope_for(current_user).owns_trip(trip), "trip")

    trip = await TripService.update_status(db, trip_id, update.status, current_user, force=update.force)
    return ApiResponse(data=TripResponse.model_validate(trip), message="Trip status updated successfully")


@router.delete("/{trip_id}", response_model=ApiResponse[None])
async def delete_trip(
    trip_id: int = Path(..., description="Trip ID"),
    current_user: dict = Depends(require_role(TRIP_EDITORS)),
    db: AsyncSession = Depends(get_db)
):
    """Delete a trip that has no payments and no linked transport request."""
    trip = await TripService.get_by_id(db, trip_id)
    ownership_guard.enforce(scope_for(current_user).owns_trip(trip), "trip")

    await TripService.delete(db, trip_id, current_user)
    return ApiResponse(message="Trip deleted successfully")
