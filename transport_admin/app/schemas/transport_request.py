"""
Transport request schemas.

Schemas for company submissions and the admin review workflow.
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime

from transport_admin.app.models.transport_request_enums import (
    TransportRequestStatus, QuantityUnit, Urgency
)


class TransportRequestCreate(BaseModel):
    """Schema for a company submitting a transport request."""
    material_type: str = Field(..., min_length=1, max_length=100)
    quantity: float = Field(..., gt=0)
    quantity_unit: QuantityUnit
    pickup_location: str = Field(..., min_length=1)
    drop_location: str = Field(..., min_length=1)
    preferred_date: date
    urgency: Urgency = Urgency.MEDIUM
    special_instructions: Optional[str] = None
    contact_person: str = Field(..., min_length=1, max_length=255)
    contact_phone: str = Field(..., min_length=1, max_length=20)
    vehicle_type: Optional[str] = Field(None, max_length=100)
    temperature_control: bool = False
    hazardous_material: bool = False
    insurance_required: bool = False
    estimated_budget: Optional[float] = Field(None, ge=0)


class TransportRequestStatusUpdate(BaseModel):
    """Admin decision on a transport request."""
    status: TransportRequestStatus
    admin_notes: Optional[str] = None
    assigned_trip_id: Optional[int] = None
    force: bool = False


class AssignTripRequest(BaseModel):
    """
    Trip details for turning a request into a trip.

    route defaults to "<pickup> → <drop>" and base_amount to the
    request's estimated cost.
    """
    trip_number: str = Field(..., min_length=1, max_length=50)
    vehicle_owner_id: int
    driver_id: int
    manager_id: Optional[int] = None
    route: Optional[str] = None
    base_amount: Optional[float] = Field(None, ge=0)
    service_charge: float = Field(0, ge=0)
    estimated_delivery_date: Optional[datetime] = None
    admin_notes: Optional[str] = None


class TransportRequestResponse(BaseModel):
    """Schema for transport request response."""
    id: int
    request_number: str
    company_id: int
    company_name: Optional[str] = None
    company_email: Optional[str] = None
    material_type: str
    quantity: float
    quantity_unit: QuantityUnit
    pickup_location: str
    drop_location: str
    preferred_date: date
    urgency: Urgency
    special_instructions: Optional[str]
    contact_person: str
    contact_phone: str
    vehicle_type: Optional[str]
    temperature_control: bool
    hazardous_material: bool
    insurance_required: bool
    estimated_budget: Optional[float]
    estimated_cost: int
    status: TransportRequestStatus
    admin_notes: Optional[str]
    assigned_trip_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RequestStatusGroup(BaseModel):
    status: str
    count: int
    total_estimated_cost: int


class RequestUrgencyGroup(BaseModel):
    urgency: str
    count: int


class TransportRequestTotals(BaseModel):
    total_requests: int
    total_estimated_value: int
    average_quantity: float


class TransportRequestStats(BaseModel):
    """Admin rollup over all transport requests."""
    by_status: List[RequestStatusGroup]
    totals: TransportRequestTotals
    by_urgency: List[RequestUrgencyGroup]
