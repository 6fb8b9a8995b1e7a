"""
Payment schemas.

Payments are recorded manually; there is no gateway payload.
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from transport_admin.app.models.billing_enums import PaymentStatus


class PaymentCreate(BaseModel):
    trip_id: int
    company_id: int
    vehicle_owner_id: int
    amount: float = Field(..., gt=0)
    payment_method: Optional[str] = Field(None, max_length=50)
    transaction_id: Optional[str] = Field(None, max_length=100)


class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus
    transaction_id: Optional[str] = Field(None, max_length=100)
    force: bool = False


class PaymentResponse(BaseModel):
    """Schema for payment response."""
    id: str
    trip_id: int
    trip_number: Optional[str] = None
    route: Optional[str] = None
    company_id: int
    company_name: Optional[str] = None
    vehicle_owner_id: int
    vehicle_owner_name: Optional[str] = None
    amount: float
    service_charge: float
    total_amount: float
    status: PaymentStatus
    due_date: datetime
    payment_date: Optional[datetime]
    transaction_id: Optional[str]
    payment_method: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PaymentStatusGroup(BaseModel):
    status: str
    count: int
    total_amount: float


class PaymentTotals(BaseModel):
    total_payments: int
    total_amount: float
    average_amount: float


class PaymentStats(BaseModel):
    by_status: List[PaymentStatusGroup]
    totals: PaymentTotals
