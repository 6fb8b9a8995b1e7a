"""
Notification Database Model.

In-app notifications addressed to a party (company, vehicle owner,
driver, ...) rather than to a login account.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, JSON, Enum
from sqlalchemy.sql import func
from transport_admin.app.db.session import Base
from transport_admin.app.core.timeutils import utcnow
from transport_admin.app.models.enums import UserRole, enum_values
import enum


class NotificationType(str, enum.Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    REQUEST_UPDATE = "request_update"
    TRIP_UPDATE = "trip_update"
    PAYMENT_UPDATE = "payment_update"


class Notification(Base):
    """
    In-App Notification.
    Stores messages for a recipient identified by role + owner id.
    """
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Recipient
    recipient_role = Column(Enum(UserRole, values_callable=enum_values, name="recipient_role"), nullable=False, index=True)
    recipient_id = Column(Integer, nullable=False, index=True)

    # Content
    type = Column(Enum(NotificationType, values_callable=enum_values, name="notification_type"), default=NotificationType.INFO, nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    metadata_payload = Column(JSON, nullable=True)

    # State
    is_read = Column(Boolean, default=False, nullable=False, index=True)
    read_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Notification(id={self.id}, recipient={self.recipient_role.value}:{self.recipient_id}, title='{self.title}')>"
