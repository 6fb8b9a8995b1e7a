"""
Transport Request Service.

Company submissions, the admin review workflow and the "assign trip"
unit of work that turns an approved request into a trip.
"""

import logging
import secrets
import string
import time
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from transport_admin.app.core.exceptions import BusinessRuleError, ResourceNotFoundError
from transport_admin.app.db.session import unit_of_work
from transport_admin.app.domain.lifecycle.transitions import TRANSPORT_REQUEST_TRANSITIONS, ensure_transition
from transport_admin.app.domain.pricing.estimation import estimate_cost
from transport_admin.app.models.company import Company
from transport_admin.app.models.enums import UserRole
from transport_admin.app.models.notification import NotificationType
from transport_admin.app.models.transport_request import TransportRequest
from transport_admin.app.models.transport_request_enums import (
    TransportRequestStatus, Urgency, TRIP_LINKED_STATUSES
)
from transport_admin.app.models.trip import Trip
from transport_admin.app.schemas.transport_request import (
    TransportRequestCreate, AssignTripRequest, TransportRequestStats,
    RequestStatusGroup, RequestUrgencyGroup, TransportRequestTotals
)
from transport_admin.app.services.audit import log_event, AuditAction
from transport_admin.app.services.notification_service import NotificationService
from transport_admin.app.services.trip_service import TripService

logger = logging.getLogger("transport_admin.transport_requests")

_SUFFIX_ALPHABET = string.digits + string.ascii_uppercase


def generate_request_number() -> str:
    """REQ-<epoch ms>-<5 random base36 characters>."""
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(5))
    return f"REQ-{int(time.time() * 1000)}-{suffix}"


class TransportRequestService:

    @staticmethod
    async def get_by_id(db: AsyncSession, request_id: int) -> TransportRequest:
        result = await db.execute(
            select(TransportRequest)
            .options(joinedload(TransportRequest.company))
            .where(TransportRequest.id == request_id)
            .execution_options(populate_existing=True)
        )
        transport_request = result.scalar_one_or_none()
        if not transport_request:
            raise ResourceNotFoundError("Transport request", request_id)
        return transport_request

    @staticmethod
    async def create(
        db: AsyncSession,
        company_id: int,
        data: TransportRequestCreate,
        actor: Optional[dict] = None
    ) -> TransportRequest:
        """Insert a pending request with its estimated cost."""
        if await db.get(Company, company_id) is None:
            raise ResourceNotFoundError("Company", company_id)

        cost = estimate_cost(
            quantity=data.quantity,
            quantity_unit=data.quantity_unit,
            urgency=data.urgency,
            vehicle_type=data.vehicle_type,
            temperature_control=data.temperature_control,
            hazardous_material=data.hazardous_material,
            insurance_required=data.insurance_required,
        )

        async with unit_of_work(db):
            transport_request = TransportRequest(
                request_number=generate_request_number(),
                company_id=company_id,
                estimated_cost=cost,
                status=TransportRequestStatus.PENDING,
                **data.model_dump()
            )
            db.add(transport_request)
            await db.flush()

            await log_event(
                db, AuditAction.TRANSPORT_REQUEST_CREATED, "transport_request", transport_request.id, actor,
                metadata={"request_number": transport_request.request_number, "estimated_cost": cost}
            )

        logger.info(
            "Transport request %s submitted by company %s (estimated_cost=%s)",
            transport_request.request_number, company_id, cost
        )
        return await TransportRequestService.get_by_id(db, transport_request.id)

    @staticmethod
    async def list_by_company(db: AsyncSession, company_id: int) -> List[TransportRequest]:
        result = await db.execute(
            select(TransportRequest)
            .options(joinedload(TransportRequest.company))
            .where(TransportRequest.company_id == company_id)
            .order_by(TransportRequest.created_at.desc(), TransportRequest.id.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def list_all(
        db: AsyncSession,
        status: Optional[TransportRequestStatus] = None,
        urgency: Optional[Urgency] = None,
        company_id: Optional[int] = None
    ) -> List[TransportRequest]:
        query = select(TransportRequest).options(joinedload(TransportRequest.company))

        if status:
            query = query.where(TransportRequest.status == status)
        if urgency:
            query = query.where(TransportRequest.urgency == urgency)
        if company_id:
            query = query.where(TransportRequest.company_id == company_id)

        result = await db.execute(
            query.order_by(TransportRequest.created_at.desc(), TransportRequest.id.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def _notify_company(db: AsyncSession, transport_request: TransportRequest) -> None:
        status_label = transport_request.status.value.replace("_", " ")
        await NotificationService.notify(
            db, UserRole.COMPANY, transport_request.company_id,
            "Transport request updated",
            f"Your transport request {transport_request.request_number} is now {status_label}.",
            NotificationType.REQUEST_UPDATE,
            {
                "transport_request_id": transport_request.id,
                "status": transport_request.status.value,
                "assigned_trip_id": transport_request.assigned_trip_id,
            }
        )

    @staticmethod
    async def _ensure_trip_linkable(db: AsyncSession, transport_request: TransportRequest, trip: Trip) -> None:
        """A request may only link a trip of its own company that no other request holds."""
        if trip.company_id != transport_request.company_id:
            raise BusinessRuleError(
                "Trip belongs to a different company",
                details={"trip_id": trip.id, "trip_company_id": trip.company_id}
            )
        holder = (await db.execute(
            select(TransportRequest.id).where(
                TransportRequest.assigned_trip_id == trip.id,
                TransportRequest.id != transport_request.id
            )
        )).scalar()
        if holder is not None:
            raise BusinessRuleError(
                "Trip is already linked to another transport request",
                details={"trip_id": trip.id, "transport_request_id": holder}
            )

    @staticmethod
    async def update_status(
        db: AsyncSession,
        request_id: int,
        new_status: TransportRequestStatus,
        admin_notes: Optional[str] = None,
        assigned_trip_id: Optional[int] = None,
        actor: Optional[dict] = None,
        force: bool = False
    ) -> TransportRequest:
        """
        Admin decision on a request.

        Overwrites status and admin notes. A trip link is only kept while
        the request is assigned, in progress or completed.
        """
        async with unit_of_work(db):
            transport_request = await TransportRequestService.get_by_id(db, request_id)
            old_status = transport_request.status
            ensure_transition(
                "transport request", TRANSPORT_REQUEST_TRANSITIONS, old_status, new_status, force
            )

            if assigned_trip_id is not None:
                if new_status not in TRIP_LINKED_STATUSES:
                    raise BusinessRuleError(
                        f"A trip can only be linked to an assigned, in progress or completed request, not '{new_status.value}'"
                    )
                trip = await db.get(Trip, assigned_trip_id)
                if trip is None:
                    raise ResourceNotFoundError("Trip", assigned_trip_id)
                await TransportRequestService._ensure_trip_linkable(db, transport_request, trip)
                transport_request.assigned_trip_id = assigned_trip_id

            if new_status == TransportRequestStatus.ASSIGNED and transport_request.assigned_trip_id is None:
                raise BusinessRuleError("An assigned request must be linked to a trip")

            if new_status not in TRIP_LINKED_STATUSES:
                transport_request.assigned_trip_id = None

            transport_request.status = new_status
            transport_request.admin_notes = admin_notes

            await log_event(
                db,
                AuditAction.STATUS_FORCED if force else AuditAction.TRANSPORT_REQUEST_STATUS_CHANGED,
                "transport_request", transport_request.id, actor,
                metadata={
                    "from": old_status.value,
                    "to": new_status.value,
                    "assigned_trip_id": transport_request.assigned_trip_id,
                    "forced": force,
                }
            )
            await TransportRequestService._notify_company(db, transport_request)

        logger.info(
            "Transport request %s: %s -> %s%s",
            request_id, old_status.value, new_status.value, " (forced)" if force else ""
        )
        return await TransportRequestService.get_by_id(db, request_id)

    @staticmethod
    async def assign_trip(
        db: AsyncSession,
        request_id: int,
        data: AssignTripRequest,
        actor: Optional[dict] = None
    ) -> TransportRequest:
        """
        Create a trip for a request and link it, all or nothing.

        A pending request is approved on the way. The trip's company comes
        from the request; route and base amount default from it too.
        """
        async with unit_of_work(db):
            transport_request = await TransportRequestService.get_by_id(db, request_id)

            if transport_request.assigned_trip_id is not None:
                raise BusinessRuleError(
                    "Transport request is already linked to a trip",
                    details={"assigned_trip_id": transport_request.assigned_trip_id}
                )

            if transport_request.status == TransportRequestStatus.PENDING:
                transport_request.status = TransportRequestStatus.APPROVED
                await log_event(
                    db, AuditAction.TRANSPORT_REQUEST_STATUS_CHANGED, "transport_request", transport_request.id, actor,
                    metadata={"from": TransportRequestStatus.PENDING.value, "to": TransportRequestStatus.APPROVED.value}
                )

            ensure_transition(
                "transport request", TRANSPORT_REQUEST_TRANSITIONS,
                transport_request.status, TransportRequestStatus.ASSIGNED
            )

            fields: Dict[str, Any] = data.model_dump(exclude={"admin_notes"})
            fields["company_id"] = transport_request.company_id
            if not fields.get("route"):
                fields["route"] = f"{transport_request.pickup_location} → {transport_request.drop_location}"
            if fields.get("base_amount") is None:
                fields["base_amount"] = transport_request.estimated_cost

            trip = await TripService.add_trip(db, fields, actor)

            transport_request.assigned_trip_id = trip.id
            transport_request.status = TransportRequestStatus.ASSIGNED
            if data.admin_notes is not None:
                transport_request.admin_notes = data.admin_notes

            await log_event(
                db, AuditAction.TRIP_ASSIGNED, "transport_request", transport_request.id, actor,
                metadata={"trip_id": trip.id, "trip_number": trip.trip_number}
            )
            await TransportRequestService._notify_company(db, transport_request)

        logger.info("Transport request %s assigned to trip %s", request_id, trip.trip_number)
        return await TransportRequestService.get_by_id(db, request_id)

    @staticmethod
    async def stats(db: AsyncSession) -> TransportRequestStats:
        """Status groups, overall totals and urgency groups."""
        status_rows = await db.execute(
            select(
                TransportRequest.status,
                func.count(TransportRequest.id).label("count"),
                func.coalesce(func.sum(TransportRequest.estimated_cost), 0).label("total_estimated_cost"),
            ).group_by(TransportRequest.status)
        )
        by_status = [
            RequestStatusGroup(
                status=row.status.value,
                count=row.count,
                total_estimated_cost=int(row.total_estimated_cost),
            )
            for row in status_rows
        ]

        totals = (await db.execute(
            select(
                func.count(TransportRequest.id).label("count"),
                func.coalesce(func.sum(TransportRequest.estimated_cost), 0).label("value"),
                func.coalesce(func.avg(TransportRequest.quantity), 0).label("average_quantity"),
            )
        )).one()

        urgency_rows = await db.execute(
            select(
                TransportRequest.urgency,
                func.count(TransportRequest.id).label("count"),
            ).group_by(TransportRequest.urgency)
        )
        by_urgency = [
            RequestUrgencyGroup(urgency=row.urgency.value, count=row.count)
            for row in urgency_rows
        ]

        return TransportRequestStats(
            by_status=by_status,
            totals=TransportRequestTotals(
                total_requests=totals.count,
                total_estimated_value=int(totals.value),
                average_quantity=float(totals.average_quantity),
            ),
            by_urgency=by_urgency,
        )
