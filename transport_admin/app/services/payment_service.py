"""
Payment Service.

Manual payment ledger: payments are recorded against a trip and moved
through their status table by hand. Nothing here talks to a gateway.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from transport_admin.app.core.config import settings
from transport_admin.app.core.exceptions import BusinessRuleError, ResourceNotFoundError
from transport_admin.app.core.guards import OwnerScope
from transport_admin.app.core.timeutils import utcnow
from transport_admin.app.db.session import unit_of_work
from transport_admin.app.domain.billing.amounts import compute_due_date, compute_total_amount
from transport_admin.app.domain.lifecycle.transitions import PAYMENT_TRANSITIONS, ensure_transition
from transport_admin.app.models.billing_enums import PaymentStatus
from transport_admin.app.models.company import Company
from transport_admin.app.models.enums import UserRole
from transport_admin.app.models.notification import NotificationType
from transport_admin.app.models.payment import Payment
from transport_admin.app.models.trip import Trip
from transport_admin.app.models.vehicle_owner import VehicleOwner
from transport_admin.app.schemas.payment import (
    PaymentCreate, PaymentStats, PaymentStatusGroup, PaymentTotals
)
from transport_admin.app.services.audit import log_event, AuditAction
from transport_admin.app.services.notification_service import NotificationService

logger = logging.getLogger("transport_admin.payments")

PAYMENT_LOAD_OPTIONS = (
    joinedload(Payment.trip),
    joinedload(Payment.company),
    joinedload(Payment.vehicle_owner),
)


def generate_payment_id() -> str:
    return f"PAY-{uuid.uuid4().hex.upper()}"


class PaymentService:

    @staticmethod
    async def get_by_id(db: AsyncSession, payment_id: str) -> Payment:
        result = await db.execute(
            select(Payment)
            .options(*PAYMENT_LOAD_OPTIONS)
            .where(Payment.id == payment_id)
            .execution_options(populate_existing=True)
        )
        payment = result.scalar_one_or_none()
        if not payment:
            raise ResourceNotFoundError("Payment", payment_id)
        return payment

    @staticmethod
    async def create(db: AsyncSession, data: PaymentCreate, actor: Optional[dict] = None) -> Payment:
        """
        Record a pending payment.

        The trip, company and vehicle owner are checked in that order. The
        payment is due `payment_due_days` after creation.
        """
        trip = await db.get(Trip, data.trip_id)
        if trip is None:
            raise ResourceNotFoundError("Trip", data.trip_id)
        if await db.get(Company, data.company_id) is None:
            raise ResourceNotFoundError("Company", data.company_id)
        if await db.get(VehicleOwner, data.vehicle_owner_id) is None:
            raise ResourceNotFoundError("Vehicle owner", data.vehicle_owner_id)
        if (trip.company_id, trip.vehicle_owner_id) != (data.company_id, data.vehicle_owner_id):
            raise BusinessRuleError(
                "Payment parties must match the trip",
                details={"company_id": trip.company_id, "vehicle_owner_id": trip.vehicle_owner_id}
            )

        now = utcnow()
        async with unit_of_work(db):
            payment = Payment(
                id=generate_payment_id(),
                trip_id=data.trip_id,
                company_id=data.company_id,
                vehicle_owner_id=data.vehicle_owner_id,
                amount=data.amount,
                service_charge=0,
                total_amount=compute_total_amount(data.amount, 0),
                status=PaymentStatus.PENDING,
                due_date=compute_due_date(now, settings.payment_due_days),
                transaction_id=data.transaction_id,
                payment_method=data.payment_method or settings.default_payment_method,
                created_at=now,
                updated_at=now,
            )
            db.add(payment)
            await db.flush()

            await log_event(
                db, AuditAction.PAYMENT_CREATED, "payment", payment.id, actor,
                metadata={"trip_id": data.trip_id, "amount": data.amount}
            )
            await NotificationService.notify(
                db, UserRole.VEHICLE_OWNER, data.vehicle_owner_id,
                "Payment recorded", f"A payment of {data.amount:.2f} has been recorded.",
                NotificationType.PAYMENT_UPDATE, {"payment_id": payment.id, "trip_id": data.trip_id}
            )

        logger.info("Payment %s recorded for trip %s", payment.id, data.trip_id)
        return await PaymentService.get_by_id(db, payment.id)

    @staticmethod
    async def update_status(
        db: AsyncSession,
        payment_id: str,
        new_status: PaymentStatus,
        transaction_id: Optional[str] = None,
        actor: Optional[dict] = None,
        force: bool = False
    ) -> Payment:
        """Move a payment along its status table. completed stamps payment_date."""
        async with unit_of_work(db):
            payment = await PaymentService.get_by_id(db, payment_id)
            old_status = payment.status
            ensure_transition("payment", PAYMENT_TRANSITIONS, old_status, new_status, force)

            payment.status = new_status
            if new_status == PaymentStatus.COMPLETED:
                payment.payment_date = utcnow()
            if transaction_id is not None:
                payment.transaction_id = transaction_id

            await log_event(
                db, AuditAction.STATUS_FORCED if force else AuditAction.PAYMENT_STATUS_CHANGED,
                "payment", payment.id, actor,
                metadata={"from": old_status.value, "to": new_status.value, "forced": force}
            )

            message = f"Payment {payment.id} is now {new_status.value}."
            for role, party_id in (
                (UserRole.COMPANY, payment.company_id),
                (UserRole.VEHICLE_OWNER, payment.vehicle_owner_id),
            ):
                await NotificationService.notify(
                    db, role, party_id, "Payment status updated", message,
                    NotificationType.PAYMENT_UPDATE,
                    {"payment_id": payment.id, "status": new_status.value}
                )

        logger.info("Payment %s: %s -> %s%s", payment_id, old_status.value, new_status.value, " (forced)" if force else "")
        return await PaymentService.get_by_id(db, payment_id)

    @staticmethod
    async def list_all(
        db: AsyncSession,
        scope: OwnerScope,
        status: Optional[PaymentStatus] = None,
        company_id: Optional[int] = None,
        vehicle_owner_id: Optional[int] = None,
        trip_id: Optional[int] = None
    ) -> List[Payment]:
        query = scope.scope_payments(select(Payment))

        if status:
            query = query.where(Payment.status == status)
        if company_id:
            query = query.where(Payment.company_id == company_id)
        if vehicle_owner_id:
            query = query.where(Payment.vehicle_owner_id == vehicle_owner_id)
        if trip_id:
            query = query.where(Payment.trip_id == trip_id)

        result = await db.execute(
            query.options(*PAYMENT_LOAD_OPTIONS)
            .order_by(Payment.created_at.desc(), Payment.id.desc())
        )
        return result.unique().scalars().all()

    @staticmethod
    async def delete(db: AsyncSession, payment_id: str, actor: Optional[dict] = None) -> None:
        async with unit_of_work(db):
            payment = await PaymentService.get_by_id(db, payment_id)
            await db.delete(payment)
            await log_event(
                db, AuditAction.PAYMENT_DELETED, "payment", payment_id, actor,
                metadata={"trip_id": payment.trip_id, "amount": payment.amount}
            )
        logger.info("Payment %s deleted", payment_id)

    @staticmethod
    async def stats(db: AsyncSession, scope: OwnerScope) -> PaymentStats:
        """Status groups plus overall count, sum and average of amounts."""
        grouped = scope.scope_payments(
            select(
                Payment.status,
                func.count(Payment.id).label("count"),
                func.coalesce(func.sum(Payment.amount), 0).label("total_amount"),
            )
        ).group_by(Payment.status)

        by_status = [
            PaymentStatusGroup(status=row.status.value, count=row.count, total_amount=float(row.total_amount))
            for row in await db.execute(grouped)
        ]

        totals = (await db.execute(scope.scope_payments(
            select(
                func.count(Payment.id).label("count"),
                func.coalesce(func.sum(Payment.amount), 0).label("total_amount"),
                func.coalesce(func.avg(Payment.amount), 0).label("average_amount"),
            )
        ))).one()

        return PaymentStats(
            by_status=by_status,
            totals=PaymentTotals(
                total_payments=totals.count,
                total_amount=float(totals.total_amount),
                average_amount=float(totals.average_amount),
            )
        )
