"""
Audit Log Database Model.

Tracks every create and status change on transport requests, trips and
payments.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from transport_admin.app.db.session import Base
from transport_admin.app.core.timeutils import utcnow


class AuditLog(Base):
    """
    Audit log model.

    Events logged:
    - TRANSPORT_REQUEST_CREATED / TRANSPORT_REQUEST_STATUS_CHANGED / TRIP_ASSIGNED
    - TRIP_CREATED / TRIP_UPDATED / TRIP_STATUS_CHANGED / TRIP_DELETED
    - PAYMENT_CREATED / PAYMENT_STATUS_CHANGED / PAYMENT_DELETED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (None for system actions)
    actor_id = Column(Integer, index=True, nullable=True)
    actor_role = Column(String(50), nullable=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # What it was performed on
    entity_type = Column(String(50), nullable=False, index=True)
    entity_id = Column(String(64), nullable=False, index=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    timestamp = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', entity={self.entity_type}:{self.entity_id})>"
