"""
Dashboard Service.

Handles data aggregation for the per-role dashboards and listings.
Focused on READ-ONLY operations; nothing is cached.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import List

from transport_admin.app.core.guards import OwnerScope
from transport_admin.app.core.timeutils import month_bounds
from transport_admin.app.models.billing_enums import PaymentStatus
from transport_admin.app.models.payment import Payment
from transport_admin.app.models.trip import Trip
from transport_admin.app.models.trip_enums import ACTIVE_TRIP_STATUSES, COMPLETED_TRIP_STATUSES
from transport_admin.app.schemas.dashboard import DashboardStats, InvoiceResponse, StatusCount
from transport_admin.app.services.payment_service import PaymentService
from transport_admin.app.services.trip_service import TRIP_LOAD_OPTIONS


class DashboardService:

    @staticmethod
    async def get_dashboard_stats(db: AsyncSession, scope: OwnerScope) -> DashboardStats:
        """Trip and payment rollups for one party."""

        # 1. Trips grouped by status
        trip_query = scope.scope_trips(
            select(
                Trip.status,
                func.count(Trip.id).label("count"),
                func.coalesce(func.sum(Trip.total_amount), 0).label("total_amount"),
            )
        ).group_by(Trip.status)
        trip_rows = (await db.execute(trip_query)).all()

        # 2. Payments grouped by status
        payment_query = scope.scope_payments(
            select(
                Payment.status,
                func.count(Payment.id).label("count"),
                func.coalesce(func.sum(Payment.amount), 0).label("total_amount"),
            )
        ).group_by(Payment.status)
        payment_rows = (await db.execute(payment_query)).all()

        # 3. Completed payments paid this calendar month (UTC)
        month_start, next_month_start = month_bounds()
        monthly_query = scope.scope_payments(
            select(func.coalesce(func.sum(Payment.amount), 0))
        ).where(
            Payment.status == PaymentStatus.COMPLETED,
            Payment.payment_date >= month_start,
            Payment.payment_date < next_month_start,
        )
        this_month_paid = (await db.execute(monthly_query)).scalar() or 0

        # 4. Derived counters, filtered from the trip groups
        total_trips = sum(row.count for row in trip_rows)
        active_trips = sum(row.count for row in trip_rows if row.status in ACTIVE_TRIP_STATUSES)
        completed_trips = sum(row.count for row in trip_rows if row.status in COMPLETED_TRIP_STATUSES)
        total_revenue = sum(float(row.total_amount) for row in trip_rows if row.status in COMPLETED_TRIP_STATUSES)

        return DashboardStats(
            trip_stats=[
                StatusCount(status=row.status.value, count=row.count, total_amount=float(row.total_amount))
                for row in trip_rows
            ],
            payment_stats=[
                StatusCount(status=row.status.value, count=row.count, total_amount=float(row.total_amount))
                for row in payment_rows
            ],
            this_month_paid=float(this_month_paid),
            total_trips=total_trips,
            active_trips=active_trips,
            completed_trips=completed_trips,
            total_revenue=total_revenue,
        )

    @staticmethod
    async def get_trips(db: AsyncSession, scope: OwnerScope) -> List[Trip]:
        result = await db.execute(
            scope.scope_trips(select(Trip))
            .options(*TRIP_LOAD_OPTIONS)
            .order_by(Trip.created_at.desc(), Trip.id.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def get_payments(db: AsyncSession, scope: OwnerScope) -> List[Payment]:
        return await PaymentService.list_all(db, scope)

    @staticmethod
    async def get_invoices(db: AsyncSession, scope: OwnerScope) -> List[InvoiceResponse]:
        """Invoices are projected from payments: INV-<trip number>, issued when recorded."""
        payments = await PaymentService.list_all(db, scope)
        return [
            InvoiceResponse(
                invoice_number=f"INV-{payment.trip_number}",
                payment_id=payment.id,
                trip_id=payment.trip_id,
                trip_number=payment.trip_number,
                route=payment.route,
                company_name=payment.company_name,
                vehicle_owner_name=payment.vehicle_owner_name,
                amount=payment.amount,
                service_charge=payment.service_charge,
                total_amount=payment.total_amount,
                status=payment.status.value,
                issue_date=payment.created_at,
                due_date=payment.due_date,
                payment_date=payment.payment_date,
            )
            for payment in payments
        ]
