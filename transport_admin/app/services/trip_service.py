"""
Trip Service.

Trip creation, field updates, the status state machine, guarded delete
and stats. Every write runs in a single unit of work together with its
audit row and notifications.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from transport_admin.app.core.exceptions import (
    BusinessRuleError, DuplicateResourceError, ResourceNotFoundError
)
from transport_admin.app.core.guards import OwnerScope
from transport_admin.app.core.timeutils import utcnow
from transport_admin.app.db.session import unit_of_work
from transport_admin.app.domain.billing.amounts import compute_total_amount
from transport_admin.app.domain.lifecycle.transitions import TRIP_TRANSITIONS, ensure_transition
from transport_admin.app.models.company import Company
from transport_admin.app.models.driver import Driver
from transport_admin.app.models.enums import UserRole
from transport_admin.app.models.manager import Manager
from transport_admin.app.models.notification import NotificationType
from transport_admin.app.models.payment import Payment
from transport_admin.app.models.transport_request import TransportRequest
from transport_admin.app.models.trip import Trip
from transport_admin.app.models.trip_enums import TripStatus
from transport_admin.app.models.vehicle_owner import VehicleOwner
from transport_admin.app.schemas.trip import (
    TripStats, TripStatusGroup, CompletedTripTotals
)
from transport_admin.app.services.audit import log_event, AuditAction
from transport_admin.app.services.notification_service import NotificationService

logger = logging.getLogger("transport_admin.trips")

TRIP_LOAD_OPTIONS = (
    joinedload(Trip.company),
    joinedload(Trip.vehicle_owner),
    joinedload(Trip.driver),
    joinedload(Trip.manager),
)

# Parties a trip references, checked in this order
_PARTY_MODELS = (
    ("company_id", Company, "Company"),
    ("vehicle_owner_id", VehicleOwner, "Vehicle owner"),
    ("driver_id", Driver, "Driver"),
    ("manager_id", Manager, "Manager"),
)


class TripService:

    @staticmethod
    async def get_by_id(db: AsyncSession, trip_id: int) -> Trip:
        """Load a trip with its parties. Raises 404 if missing."""
        result = await db.execute(
            select(Trip)
            .options(*TRIP_LOAD_OPTIONS)
            .where(Trip.id == trip_id)
            .execution_options(populate_existing=True)
        )
        trip = result.scalar_one_or_none()
        if not trip:
            raise ResourceNotFoundError("Trip", trip_id)
        return trip

    @staticmethod
    async def _ensure_parties_exist(db: AsyncSession, fields: Dict[str, Any]) -> None:
        for field, model, label in _PARTY_MODELS:
            party_id = fields.get(field)
            if party_id is None:
                continue
            if await db.get(model, party_id) is None:
                raise ResourceNotFoundError(label, party_id)

    @staticmethod
    async def _ensure_trip_number_free(db: AsyncSession, trip_number: str) -> None:
        existing = await db.execute(select(Trip.id).where(Trip.trip_number == trip_number))
        if existing.scalar_one_or_none() is not None:
            raise DuplicateResourceError("Trip number already exists", field="trip_number", value=trip_number)

    @staticmethod
    async def add_trip(db: AsyncSession, fields: Dict[str, Any], actor: Optional[dict] = None) -> Trip:
        """
        Insert a pending trip into the current transaction (no commit).

        Shared by direct creation and by assigning a transport request.
        """
        await TripService._ensure_trip_number_free(db, fields["trip_number"])
        await TripService._ensure_parties_exist(db, fields)

        trip = Trip(
            trip_number=fields["trip_number"],
            company_id=fields["company_id"],
            vehicle_owner_id=fields["vehicle_owner_id"],
            driver_id=fields["driver_id"],
            manager_id=fields.get("manager_id"),
            route=fields["route"],
            estimated_delivery_date=fields.get("estimated_delivery_date"),
            base_amount=fields.get("base_amount") or 0,
            service_charge=fields.get("service_charge") or 0,
            total_amount=compute_total_amount(fields.get("base_amount"), fields.get("service_charge")),
            status=TripStatus.PENDING,
        )
        db.add(trip)
        await db.flush()

        await log_event(
            db, AuditAction.TRIP_CREATED, "trip", trip.id, actor,
            metadata={"trip_number": trip.trip_number, "total_amount": trip.total_amount}
        )
        await NotificationService.notify(
            db, UserRole.VEHICLE_OWNER, trip.vehicle_owner_id,
            "New trip", f"Trip {trip.trip_number} has been created for your vehicle.",
            NotificationType.TRIP_UPDATE, {"trip_id": trip.id}
        )
        await NotificationService.notify(
            db, UserRole.DRIVER, trip.driver_id,
            "New trip", f"You have been assigned to trip {trip.trip_number}.",
            NotificationType.TRIP_UPDATE, {"trip_id": trip.id}
        )
        return trip

    @staticmethod
    async def create(db: AsyncSession, fields: Dict[str, Any], actor: Optional[dict] = None) -> Trip:
        async with unit_of_work(db):
            trip = await TripService.add_trip(db, fields, actor)
        logger.info("Trip %s created (id=%s)", trip.trip_number, trip.id)
        return await TripService.get_by_id(db, trip.id)

    @staticmethod
    async def update_status(
        db: AsyncSession,
        trip_id: int,
        new_status: TripStatus,
        actor: Optional[dict] = None,
        force: bool = False
    ) -> Trip:
        """
        Move a trip to a new status.

        in_transit stamps start_date, completed stamps actual_delivery_date.
        """
        async with unit_of_work(db):
            trip = await TripService.get_by_id(db, trip_id)
            old_status = trip.status
            ensure_transition("trip", TRIP_TRANSITIONS, old_status, new_status, force)

            trip.status = new_status
            if new_status == TripStatus.IN_TRANSIT:
                trip.start_date = utcnow()
            elif new_status == TripStatus.COMPLETED:
                trip.actual_delivery_date = utcnow()

            await log_event(
                db, AuditAction.STATUS_FORCED if force else AuditAction.TRIP_STATUS_CHANGED,
                "trip", trip.id, actor,
                metadata={"from": old_status.value, "to": new_status.value, "forced": force}
            )

            message = f"Trip {trip.trip_number} is now {new_status.value.replace('_', ' ')}."
            for role, party_id in (
                (UserRole.COMPANY, trip.company_id),
                (UserRole.VEHICLE_OWNER, trip.vehicle_owner_id),
                (UserRole.DRIVER, trip.driver_id),
                (UserRole.MANAGER, trip.manager_id),
            ):
                await NotificationService.notify(
                    db, role, party_id, "Trip status updated", message,
                    NotificationType.TRIP_UPDATE,
                    {"trip_id": trip.id, "status": new_status.value}
                )

        logger.info("Trip %s: %s -> %s%s", trip_id, old_status.value, new_status.value, " (forced)" if force else "")
        return await TripService.get_by_id(db, trip_id)

    @staticmethod
    async def update(db: AsyncSession, trip_id: int, patch: Dict[str, Any], actor: Optional[dict] = None) -> Trip:
        """Apply a field patch. total_amount is re-derived when either part changes."""
        if not patch:
            raise BusinessRuleError("No fields to update")

        async with unit_of_work(db):
            trip = await TripService.get_by_id(db, trip_id)

            new_number = patch.get("trip_number")
            if new_number and new_number != trip.trip_number:
                await TripService._ensure_trip_number_free(db, new_number)
            await TripService._ensure_parties_exist(db, patch)

            for field, value in patch.items():
                setattr(trip, field, value)

            if "base_amount" in patch or "service_charge" in patch:
                trip.total_amount = compute_total_amount(trip.base_amount, trip.service_charge)

            await log_event(
                db, AuditAction.TRIP_UPDATED, "trip", trip.id, actor,
                metadata={"fields": sorted(patch.keys())}
            )

        return await TripService.get_by_id(db, trip_id)

    @staticmethod
    async def delete(db: AsyncSession, trip_id: int, actor: Optional[dict] = None) -> None:
        """Hard delete, blocked while payments or transport requests reference the trip."""
        async with unit_of_work(db):
            trip = await TripService.get_by_id(db, trip_id)

            payments = (await db.execute(
                select(func.count(Payment.id)).where(Payment.trip_id == trip_id)
            )).scalar() or 0
            if payments:
                raise BusinessRuleError(
                    "Cannot delete trip with existing payments",
                    details={"payments": payments}
                )

            linked = (await db.execute(
                select(func.count(TransportRequest.id)).where(TransportRequest.assigned_trip_id == trip_id)
            )).scalar() or 0
            if linked:
                raise BusinessRuleError(
                    "Cannot delete trip linked to a transport request",
                    details={"transport_requests": linked}
                )

            await db.delete(trip)
            await log_event(
                db, AuditAction.TRIP_DELETED, "trip", trip_id, actor,
                metadata={"trip_number": trip.trip_number}
            )

        logger.info("Trip %s deleted", trip_id)

    @staticmethod
    async def list_trips(
        db: AsyncSession,
        scope: OwnerScope,
        status: Optional[TripStatus] = None,
        company_id: Optional[int] = None,
        vehicle_owner_id: Optional[int] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        page: int = 1,
        limit: int = 20
    ) -> Tuple[List[Trip], int]:
        """Scoped, filtered, paginated trip listing, newest first."""
        query = scope.scope_trips(select(Trip))

        if status:
            query = query.where(Trip.status == status)
        if company_id:
            query = query.where(Trip.company_id == company_id)
        if vehicle_owner_id:
            query = query.where(Trip.vehicle_owner_id == vehicle_owner_id)
        if date_from:
            query = query.where(Trip.created_at >= date_from)
        if date_to:
            query = query.where(Trip.created_at <= date_to)

        total = (await db.execute(
            select(func.count()).select_from(query.subquery())
        )).scalar() or 0

        result = await db.execute(
            query.options(*TRIP_LOAD_OPTIONS)
            .order_by(Trip.created_at.desc(), Trip.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return result.scalars().all(), total

    @staticmethod
    async def stats(db: AsyncSession, scope: OwnerScope) -> TripStats:
        """Status groups plus completed-only totals."""
        grouped = scope.scope_trips(
            select(
                Trip.status,
                func.count(Trip.id).label("count"),
                func.coalesce(func.sum(Trip.total_amount), 0).label("total_revenue"),
                func.coalesce(func.sum(Trip.base_amount), 0).label("total_base_amount"),
            )
        ).group_by(Trip.status)

        by_status = [
            TripStatusGroup(
                status=row.status.value,
                count=row.count,
                total_revenue=float(row.total_revenue),
                total_base_amount=float(row.total_base_amount),
            )
            for row in await db.execute(grouped)
        ]

        completed_query = scope.scope_trips(
            select(
                func.count(Trip.id).label("count"),
                func.coalesce(func.sum(Trip.total_amount), 0).label("revenue"),
                func.coalesce(func.avg(Trip.total_amount), 0).label("average"),
            )
        ).where(Trip.status == TripStatus.COMPLETED)
        completed = (await db.execute(completed_query)).one()

        return TripStats(
            by_status=by_status,
            completed=CompletedTripTotals(
                completed_trips=completed.count,
                total_revenue=float(completed.revenue),
                average_trip_cost=float(completed.average),
            )
        )
