"""
Notification Service.

Handles creation and state management of in-app notifications. Rows are
flushed into the caller's transaction; the caller commits.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, desc
from typing import Optional, Dict, Any, List

from transport_admin.app.core.timeutils import utcnow
from transport_admin.app.models.notification import Notification, NotificationType
from transport_admin.app.models.enums import UserRole


class NotificationService:

    @staticmethod
    async def notify(
        db: AsyncSession,
        recipient_role: UserRole,
        recipient_id: Optional[int],
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Optional[Notification]:
        """Create a single notification. Parties without an id are skipped."""
        if recipient_id is None:
            return None

        notif = Notification(
            recipient_role=recipient_role,
            recipient_id=recipient_id,
            type=type,
            title=title,
            message=message,
            metadata_payload=metadata
        )
        db.add(notif)
        await db.flush()
        return notif

    @staticmethod
    async def list_for(
        db: AsyncSession,
        recipient_role: UserRole,
        recipient_id: int,
        unread_only: bool = False,
        limit: int = 50
    ) -> List[Notification]:
        query = select(Notification).where(
            Notification.recipient_role == recipient_role,
            Notification.recipient_id == recipient_id
        )

        if unread_only:
            query = query.where(Notification.is_read == False)

        query = query.order_by(desc(Notification.created_at), desc(Notification.id)).limit(limit)

        result = await db.execute(query)
        return result.scalars().all()

    @staticmethod
    async def mark_read(db: AsyncSession, notification_id: int, recipient_role: UserRole, recipient_id: int) -> bool:
        """Mark a notification as read."""
        stmt = update(Notification).where(
            Notification.id == notification_id,
            Notification.recipient_role == recipient_role,
            Notification.recipient_id == recipient_id
        ).values(
            is_read=True,
            read_at=utcnow()
        )
        result = await db.execute(stmt)
        return result.rowcount > 0

    @staticmethod
    async def mark_all_read(db: AsyncSession, recipient_role: UserRole, recipient_id: int) -> int:
        """Mark all notifications for a recipient as read."""
        stmt = update(Notification).where(
            Notification.recipient_role == recipient_role,
            Notification.recipient_id == recipient_id,
            Notification.is_read == False
        ).values(
            is_read=True,
            read_at=utcnow()
        )
        result = await db.execute(stmt)
        return result.rowcount
