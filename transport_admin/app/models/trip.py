"""
Trip database model.

Trips are created by admins, either directly or from an approved
transport request, and then driven through the trip status lifecycle.
"""

from sqlalchemy import Column, Integer, String, Text, Float, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from transport_admin.app.db.session import Base
from transport_admin.app.core.timeutils import utcnow
from transport_admin.app.models.enums import enum_values
from transport_admin.app.models.trip_enums import TripStatus


class Trip(Base):
    """
    Trip model.

    A scheduled movement of goods for a company, run by a vehicle owner's
    truck and driver. total_amount is always base_amount + service_charge.
    """
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    trip_number = Column(String(50), unique=True, index=True, nullable=False)

    # Parties
    company_id = Column(Integer, ForeignKey('companies.id'), nullable=False, index=True)
    vehicle_owner_id = Column(Integer, ForeignKey('vehicle_owners.id'), nullable=False, index=True)
    driver_id = Column(Integer, ForeignKey('drivers.id'), nullable=False, index=True)
    manager_id = Column(Integer, ForeignKey('managers.id'), nullable=True, index=True)

    route = Column(Text, nullable=False)

    # Status
    status = Column(
        Enum(TripStatus, values_callable=enum_values, name="trip_status"),
        default=TripStatus.PENDING,
        nullable=False,
        index=True
    )

    # Schedule
    start_date = Column(DateTime(timezone=True), nullable=True)
    estimated_delivery_date = Column(DateTime(timezone=True), nullable=True)
    actual_delivery_date = Column(DateTime(timezone=True), nullable=True)

    # Financials
    base_amount = Column(Float, default=0, nullable=False)
    service_charge = Column(Float, default=0, nullable=False)
    total_amount = Column(Float, default=0, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)

    company = relationship("Company")
    vehicle_owner = relationship("VehicleOwner")
    driver = relationship("Driver")
    manager = relationship("Manager")

    @property
    def company_name(self):
        return self.company.name if self.company else None

    @property
    def vehicle_owner_name(self):
        return self.vehicle_owner.name if self.vehicle_owner else None

    @property
    def driver_name(self):
        return self.driver.name if self.driver else None

    @property
    def manager_name(self):
        return self.manager.name if self.manager else None

    def __repr__(self):
        return f"<Trip(id={self.id}, trip_number='{self.trip_number}', status='{self.status.value}')>"
