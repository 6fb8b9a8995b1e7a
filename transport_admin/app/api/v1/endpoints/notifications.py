"""
Notification API Endpoints.

Each caller reads the notifications addressed to their role and id.
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Tuple

from transport_admin.app.db.session import get_db
from transport_admin.app.core.dependencies import get_current_user
from transport_admin.app.core.exceptions import ResourceNotFoundError
from transport_admin.app.core.guards import scope_for
from transport_admin.app.models.enums import UserRole
from transport_admin.app.schemas.common import ApiResponse
from transport_admin.app.schemas.notification import NotificationResponse, MarkReadResult
from transport_admin.app.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def recipient_of(current_user: dict) -> Tuple[UserRole, int]:
    """Admins are addressed by user id, every other role by its owner id."""
    scope = scope_for(current_user)
    if scope.owner_id is None:
        return scope.role, int(current_user["user_id"])
    return scope.role, scope.owner_id


@router.get("", response_model=ApiResponse[List[NotificationResponse]])
async def list_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List current user's notifications."""
    role, recipient_id = recipient_of(current_user)
    notifications = await NotificationService.list_for(db, role, recipient_id, unread_only, limit)
    return ApiResponse(data=[NotificationResponse.model_validate(n) for n in notifications])


@router.patch("/read-all", response_model=ApiResponse[MarkReadResult])
async def mark_all_notifications_read(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Mark all notifications as read."""
    role, recipient_id = recipient_of(current_user)
    count = await NotificationService.mark_all_read(db, role, recipient_id)
    await db.commit()
    return ApiResponse(data=MarkReadResult(updated=count))


@router.patch("/{notification_id}/read", response_model=ApiResponse[MarkReadResult])
async def mark_notification_read(
    notification_id: int = Path(...),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Mark a specific notification as read."""
    role, recipient_id = recipient_of(current_user)
    success = await NotificationService.mark_read(db, notification_id, role, recipient_id)
    if not success:
        raise ResourceNotFoundError("Notification", notification_id)

    await db.commit()
    return ApiResponse(data=MarkReadResult(updated=1))
