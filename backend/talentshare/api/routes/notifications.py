"""
Notification inbox endpoints. Clients poll these; there is no push channel.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from talentshare.db.session import get_db
from talentshare.core.security import get_current_user
from talentshare.models.user import User
from talentshare.schemas.common import Envelope, MessageResponse
from talentshare.schemas.notification import (
    NotificationListResponse, NotificationResponse, UnreadCountResponse,
)
from talentshare.services import notification_service

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("/", response_model=NotificationListResponse)
async def list_notifications_endpoint(
    unread_only: bool = Query(False, alias="unreadOnly"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Latest notifications (newest first, max 50) plus the unread badge count."""
    items = await notification_service.list_notifications(db, user, unread_only)
    unread = await notification_service.unread_count(db, user)
    return NotificationListResponse(count=len(items), unread_count=unread, data=items)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count_endpoint(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return UnreadCountResponse(count=await notification_service.unread_count(db, user))


@router.put("/read-all", response_model=MessageResponse)
async def mark_all_read_endpoint(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    updated = await notification_service.mark_all_read(db, user)
    return MessageResponse(message="All notifications marked as read", data={"updated": updated})


@router.put("/{notification_id}/read", response_model=Envelope[NotificationResponse])
async def mark_read_endpoint(
    notification_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    notification = await notification_service.mark_read(db, notification_id, user)
    return Envelope(data=notification)


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification_endpoint(
    notification_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await notification_service.delete_notification(db, notification_id, user)
    return MessageResponse(message="Notification deleted")
