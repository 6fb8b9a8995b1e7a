"""
Trip schemas.

Schemas for trip creation, field updates, status changes and visibility.
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime

from transport_admin.app.models.trip_enums import TripStatus


class TripCreate(BaseModel):
    """Schema for creating a trip directly."""
    trip_number: str = Field(..., min_length=1, max_length=50)
    company_id: int
    vehicle_owner_id: int
    driver_id: int
    manager_id: Optional[int] = None
    route: str = Field(..., min_length=1)
    estimated_delivery_date: Optional[datetime] = None
    base_amount: float = Field(0, ge=0)
    service_charge: float = Field(0, ge=0)


class TripUpdate(BaseModel):
    """
    Field patch for a trip.

    Status has its own endpoint and total_amount is always derived, so
    neither is accepted here.
    """
    trip_number: Optional[str] = Field(None, min_length=1, max_length=50)
    company_id: Optional[int] = None
    vehicle_owner_id: Optional[int] = None
    driver_id: Optional[int] = None
    manager_id: Optional[int] = None
    route: Optional[str] = Field(None, min_length=1)
    start_date: Optional[datetime] = None
    estimated_delivery_date: Optional[datetime] = None
    actual_delivery_date: Optional[datetime] = None
    base_amount: Optional[float] = Field(None, ge=0)
    service_charge: Optional[float] = Field(None, ge=0)

    class Config:
        extra = "forbid"

    @field_validator(
        "trip_number", "company_id", "vehicle_owner_id", "driver_id",
        "route", "base_amount", "service_charge"
    )
    @classmethod
    def not_null(cls, value):
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class TripStatusUpdate(BaseModel):
    status: TripStatus
    force: bool = False


class TripResponse(BaseModel):
    """Schema for trip response."""
    id: int
    trip_number: str
    company_id: int
    company_name: Optional[str] = None
    vehicle_owner_id: int
    vehicle_owner_name: Optional[str] = None
    driver_id: int
    driver_name: Optional[str] = None
    manager_id: Optional[int]
    manager_name: Optional[str] = None
    route: str
    status: TripStatus
    start_date: Optional[datetime]
    estimated_delivery_date: Optional[datetime]
    actual_delivery_date: Optional[datetime]
    base_amount: float
    service_charge: float
    total_amount: float
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TripListResponse(BaseModel):
    """Schema for paginated trip list."""
    trips: List[TripResponse]
    total: int
    page: int
    limit: int


class TripStatusGroup(BaseModel):
    status: str
    count: int
    total_revenue: float
    total_base_amount: float


class CompletedTripTotals(BaseModel):
    completed_trips: int
    total_revenue: float
    average_trip_cost: float


class TripStats(BaseModel):
    by_status: List[TripStatusGroup]
    completed: CompletedTripTotals
