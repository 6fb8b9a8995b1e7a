"""
Payment API Endpoints.

Payments are recorded by admins or by the paying company and moved
through their status table by hand.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from transport_admin.app.db.session import get_db
from transport_admin.app.core.guards import (
    require_role, scope_for, get_owner_scope, ensure_force_allowed, OwnerScope, OwnershipGuard
)
from transport_admin.app.models.billing_enums import PaymentStatus
from transport_admin.app.models.enums import UserRole
from transport_admin.app.schemas.common import ApiResponse
from transport_admin.app.schemas.payment import (
    PaymentCreate, PaymentStatusUpdate, PaymentResponse, PaymentStats
)
from transport_admin.app.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])
ownership_guard = OwnershipGuard()


@router.get("", response_model=ApiResponse[List[PaymentResponse]])
async def list_payments(
    status_filter: Optional[PaymentStatus] = Query(None, alias="status"),
    company_id: Optional[int] = Query(None),
    vehicle_owner_id: Optional[int] = Query(None),
    trip_id: Optional[int] = Query(None),
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncSession = Depends(get_db)
):
    """List payments visible to the caller, newest first."""
    payments = await PaymentService.list_all(
        db, scope,
        status=status_filter,
        company_id=company_id,
        vehicle_owner_id=vehicle_owner_id,
        trip_id=trip_id,
    )
    return ApiResponse(data=[PaymentResponse.model_validate(p) for p in payments])


@router.post("", response_model=ApiResponse[PaymentResponse], status_code=status.HTTP_201_CREATED)
async def create_payment(
    payment_data: PaymentCreate,
    current_user: dict = Depends(require_role([UserRole.ADMIN, UserRole.COMPANY])),
    db: AsyncSession = Depends(get_db)
):
    """
    Record a payment (Admin, or the paying Company).

    The payment starts pending and is due 7 days after creation.
    """
    scope = scope_for(current_user)
    if scope.role == UserRole.COMPANY:
        ownership_guard.enforce(payment_data.company_id == scope.owner_id, "company")

    payment = await PaymentService.create(db, payment_data, current_user)
    return ApiResponse(data=PaymentResponse.model_validate(payment), message="Payment created successfully")


@router.get("/stats", response_model=ApiResponse[PaymentStats])
async def payment_stats(
    current_user: dict = Depends(require_role([UserRole.ADMIN, UserRole.MANAGER])),
    db: AsyncSession = Depends(get_db)
):
    return ApiResponse(data=await PaymentService.stats(db, scope_for(current_user)))


@router.get("/{payment_id}", response_model=ApiResponse[PaymentResponse])
async def get_payment(
    payment_id: str = Path(..., description="Payment ID"),
    scope: OwnerScope = Depends(get_owner_scope),
    db: AsyncSession = Depends(get_db)
):
    payment = await PaymentService.get_by_id(db, payment_id)
    ownership_guard.enforce(scope.owns_payment(payment), "payment")
    return ApiResponse(data=PaymentResponse.model_validate(payment))


@router.put("/{payment_id}/status", response_model=ApiResponse[PaymentResponse])
async def update_payment_status(
    update: PaymentStatusUpdate,
    payment_id: str = Path(..., description="Payment ID"),
    current_user: dict = Depends(require_role([UserRole.ADMIN, UserRole.COMPANY])),
    db: AsyncSession = Depends(get_db)
):
    """Move a payment along its status table. completed stamps payment_date."""
    ensure_force_allowed(current_user, update.force)

    payment = await PaymentService.get_by_id(db, payment_id)
    ownership_guard.enforce(scope_for(current_user).owns_payment(payment), "payment")

    payment = await PaymentService.update_status(
        db, payment_id, update.status,
        transaction_id=update.transaction_id,
        actor=current_user,
        force=update.force,
    )
    return ApiResponse(data=PaymentResponse.model_validate(payment), message="Payment status updated successfully")


@router.delete("/{payment_id}", response_model=ApiResponse[None])
async def delete_payment(
    payment_id: str = Path(..., description="Payment ID"),
    current_user: dict = Depends(require_role([UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    await PaymentService.delete(db, payment_id, current_user)
    return ApiResponse(message="Payment deleted successfully")
