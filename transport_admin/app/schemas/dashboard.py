"""
Dashboard schemas.

Field names go over the wire in camelCase (tripStats, thisMonthPaid, ...).
"""

from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel

from transport_admin.app.schemas.common import CamelModel


class StatusCount(CamelModel):
    """One status group of a dashboard rollup."""
    status: str
    count: int
    total_amount: float = 0.0


class DashboardStats(CamelModel):
    trip_stats: List[StatusCount]
    payment_stats: List[StatusCount]
    this_month_paid: float
    total_trips: int
    active_trips: int
    completed_trips: int
    total_revenue: float


class InvoiceResponse(BaseModel):
    """An invoice is a read-only projection of a payment."""
    invoice_number: str
    payment_id: str
    trip_id: int
    trip_number: Optional[str]
    route: Optional[str]
    company_name: Optional[str]
    vehicle_owner_name: Optional[str]
    amount: float
    service_charge: float
    total_amount: float
    status: str
    issue_date: datetime
    due_date: datetime
    payment_date: Optional[datetime]
