"""
Manager database model (reference table).
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
from transport_admin.app.db.session import Base
from transport_admin.app.models.enums import PartyStatus, enum_values


class Manager(Base):
    """Operations manager supervising trips."""
    __tablename__ = "managers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(20), nullable=True)
    department = Column(String(100), nullable=True)
    status = Column(
        Enum(PartyStatus, values_callable=enum_values, name="manager_status"),
        default=PartyStatus.ACTIVE,
        nullable=False
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Manager(id={self.id}, name='{self.name}')>"
