"""
Payment database model.

Payments are recorded manually (offline transfers) against a trip and
its paying company / receiving vehicle owner.
"""

from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from transport_admin.app.db.session import Base
from transport_admin.app.core.timeutils import utcnow
from transport_admin.app.models.enums import enum_values
from transport_admin.app.models.billing_enums import PaymentStatus


class Payment(Base):
    """
    Payment model.

    payment_date is stamped exactly when the status moves to completed.
    """
    __tablename__ = "payments"

    id = Column(String(64), primary_key=True, index=True)

    # Linkage
    trip_id = Column(Integer, ForeignKey('trips.id'), nullable=False, index=True)
    company_id = Column(Integer, ForeignKey('companies.id'), nullable=False, index=True)  # Payer
    vehicle_owner_id = Column(Integer, ForeignKey('vehicle_owners.id'), nullable=False, index=True)  # Payee

    # Financials
    amount = Column(Float, nullable=False)
    service_charge = Column(Float, default=0, nullable=False)
    total_amount = Column(Float, nullable=False)

    # Status
    status = Column(
        Enum(PaymentStatus, values_callable=enum_values, name="payment_status"),
        default=PaymentStatus.PENDING,
        nullable=False,
        index=True
    )

    due_date = Column(DateTime(timezone=True), nullable=False)
    payment_date = Column(DateTime(timezone=True), nullable=True, index=True)
    transaction_id = Column(String(100), nullable=True)
    payment_method = Column(String(50), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow, nullable=False)

    trip = relationship("Trip")
    company = relationship("Company")
    vehicle_owner = relationship("VehicleOwner")

    @property
    def trip_number(self):
        return self.trip.trip_number if self.trip else None

    @property
    def route(self):
        return self.trip.route if self.trip else None

    @property
    def company_name(self):
        return self.company.name if self.company else None

    @property
    def vehicle_owner_name(self):
        return self.vehicle_owner.name if self.vehicle_owner else None

    def __repr__(self):
        return f"<Payment(id='{self.id}', status='{self.status.value}', amount={self.amount})>"
