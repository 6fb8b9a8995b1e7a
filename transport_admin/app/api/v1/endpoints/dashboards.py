"""
Role Dashboard API Endpoints.

Each party role gets its own read-only dashboard, trip, payment and
invoice views, scoped to the id carried in its token.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from transport_admin.app.db.session import get_db
from transport_admin.app.core.guards import OwnerScope, scope_dependency
from transport_admin.app.models.enums import UserRole
from transport_admin.app.schemas.common import ApiResponse
from transport_admin.app.schemas.dashboard import DashboardStats, InvoiceResponse
from transport_admin.app.schemas.payment import PaymentResponse
from transport_admin.app.schemas.trip import TripResponse
from transport_admin.app.services.dashboard_service import DashboardService


def build_role_router(prefix: str, role: UserRole, tag: str, with_invoices: bool = True) -> APIRouter:
    """Routes shared by every party role, scoped to that role."""
    router = APIRouter(prefix=prefix, tags=[tag])
    role_scope = scope_dependency(role)

    @router.get("/dashboard", response_model=ApiResponse[DashboardStats])
    async def dashboard(
        scope: OwnerScope = Depends(role_scope),
        db: AsyncSession = Depends(get_db)
    ):
        """Trip and payment rollups for the caller."""
        stats = await DashboardService.get_dashboard_stats(db, scope)
        return ApiResponse(data=stats, message="Dashboard statistics retrieved successfully")

    @router.get("/trips", response_model=ApiResponse[List[TripResponse]])
    async def trips(
        scope: OwnerScope = Depends(role_scope),
        db: AsyncSession = Depends(get_db)
    ):
        rows = await DashboardService.get_trips(db, scope)
        return ApiResponse(data=[TripResponse.model_validate(t) for t in rows])

    @router.get("/payments", response_model=ApiResponse[List[PaymentResponse]])
    async def payments(
        scope: OwnerScope = Depends(role_scope),
        db: AsyncSession = Depends(get_db)
    ):
        rows = await DashboardService.get_payments(db, scope)
        return ApiResponse(data=[PaymentResponse.model_validate(p) for p in rows])

    if with_invoices:
        @router.get("/invoices", response_model=ApiResponse[List[InvoiceResponse]])
        async def invoices(
            scope: OwnerScope = Depends(role_scope),
            db: AsyncSession = Depends(get_db)
        ):
            return ApiResponse(data=await DashboardService.get_invoices(db, scope))

    return router


company_router = build_role_router("/company", UserRole.COMPANY, "Company - Dashboard")
manager_router = build_role_router("/manager", UserRole.MANAGER, "Manager - Dashboard")
vehicle_owner_router = build_role_router("/vehicleOwner", UserRole.VEHICLE_OWNER, "Vehicle Owner - Dashboard")
# Drivers are not invoiced
driver_router = build_role_router("/driver", UserRole.DRIVER, "Driver - Dashboard", with_invoices=False)
