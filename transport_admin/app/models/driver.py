"""
Driver database model (reference table).
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey
from sqlalchemy.sql import func
from transport_admin.app.db.session import Base
from transport_admin.app.models.enums import PartyStatus, enum_values


class Driver(Base):
    """Driver model. Every driver belongs to a vehicle owner."""
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(20), nullable=True)
    license_number = Column(String(50), unique=True, nullable=True)
    vehicle_type = Column(String(100), nullable=True)

    # Hierarchy - Driver belongs to Vehicle Owner
    vehicle_owner_id = Column(Integer, ForeignKey('vehicle_owners.id'), nullable=False, index=True)

    status = Column(
        Enum(PartyStatus, values_callable=enum_values, name="driver_status"),
        default=PartyStatus.ACTIVE,
        nullable=False
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Driver(id={self.id}, name='{self.name}', vehicle_owner_id={self.vehicle_owner_id})>"
