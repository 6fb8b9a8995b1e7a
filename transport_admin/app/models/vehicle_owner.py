"""
Vehicle Owner database model (reference table).
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, Float
from sqlalchemy.sql import func
from transport_admin.app.db.session import Base
from transport_admin.app.models.enums import PartyStatus, enum_values


class VehicleOwner(Base):
    """Owner of the trucks that run trips; payee of payments."""
    __tablename__ = "vehicle_owners"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    fleet_size = Column(Integer, default=0, nullable=False)
    rating = Column(Float, default=0, nullable=False)
    status = Column(
        Enum(PartyStatus, values_callable=enum_values, name="vehicle_owner_status"),
        default=PartyStatus.ACTIVE,
        nullable=False
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<VehicleOwner(id={self.id}, name='{self.name}')>"
