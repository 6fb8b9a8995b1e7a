"""
Transport Request database model.

A company's ask for material to be moved; the precursor of a Trip.
Rows are never deleted so the table doubles as an audit trail.
"""

from sqlalchemy import Column, Integer, String, Text, Float, Boolean, Date, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from transport_admin.app.db.session import Base
from transport_admin.app.core.timeutils import utcnow
from transport_admin.app.models.enums import enum_values
from transport_admin.app.models.transport_request_enums import (
    TransportRequestStatus, QuantityUnit, Urgency
)


class TransportRequest(Base):
    """
    Transport request model.

    estimated_cost is computed once at creation and never rewritten.
    assigned_trip_id is only set while the request is assigned, in
    progress or completed.
    """
    __tablename__ = "transport_requests"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    request_number = Column(String(40), unique=True, index=True, nullable=False)

    # Ownership
    company_id = Column(Integer, ForeignKey('companies.id'), nullable=False, index=True)

    # Cargo
    material_type = Column(String(100), nullable=False)
    quantity = Column(Float, nullable=False)
    quantity_unit = Column(Enum(QuantityUnit, values_callable=enum_values, name="quantity_unit"), nullable=False)

    # Route and schedule
    pickup_location = Column(Text, nullable=False)
    drop_location = Column(Text, nullable=False)
    preferred_date = Column(Date, nullable=False)
    urgency = Column(Enum(Urgency, values_callable=enum_values, name="urgency"), nullable=False, index=True)
    special_instructions = Column(Text, nullable=True)

    # Contact
    contact_person = Column(String(255), nullable=False)
    contact_phone = Column(String(20), nullable=False)

    # Handling requirements
    vehicle_type = Column(String(100), nullable=True)
    temperature_control = Column(Boolean, default=False, nullable=False)
    hazardous_material = Column(Boolean, default=False, nullable=False)
    insurance_required = Column(Boolean, default=False, nullable=False)

    # Money
    estimated_budget = Column(Float, nullable=True)
    estimated_cost = Column(Integer, nullable=False)

    # Lifecycle
    status = Column(
        Enum(TransportRequestStatus, values_callable=enum_values, name="transport_request_status"),
        default=TransportRequestStatus.PENDING,
        nullable=False,
        index=True
    )
    admin_notes = Column(Text, nullable=True)
    assigned_trip_id = Column(Integer, ForeignKey('trips.id'), nullable=True, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)

    company = relationship("Company")
    assigned_trip = relationship("Trip")

    @property
    def company_name(self):
        return self.company.name if self.company else None

    @property
    def company_email(self):
        return self.company.email if self.company else None

    def __repr__(self):
        return f"<TransportRequest(id={self.id}, request_number='{self.request_number}', status='{self.status.value}')>"
