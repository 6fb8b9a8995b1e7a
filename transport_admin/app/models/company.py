"""
Company database model.

Companies ship material and submit transport requests. The company CRUD
surface lives in a separate admin service; this backend only reads it.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Enum
from sqlalchemy.sql import func
from transport_admin.app.db.session import Base
from transport_admin.app.models.enums import PartyStatus, enum_values


class Company(Base):
    """Company model (reference table)."""
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    gst_number = Column(String(15), unique=True, nullable=True)
    status = Column(
        Enum(PartyStatus, values_callable=enum_values, name="company_status"),
        default=PartyStatus.ACTIVE,
        nullable=False
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Company(id={self.id}, name='{self.name}')>"
