"""
Notification fan-out and the owner-scoped notification inbox.

emit() is best effort. Each record is written inside its own SAVEPOINT so a
failed insert rolls back only that record and the caller's transaction
(booking, review, talent deletion) carries on untouched. Failures are
logged and counted, never raised.
"""

from typing import Optional

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from talentshare.core.config import get_settings
from talentshare.core.exceptions import NotFoundError, ForbiddenError
from talentshare.core.logging import get_logger
from talentshare.core.metrics import record_notification
from talentshare.models.booking import Booking
from talentshare.models.notification import Notification
from talentshare.models.talent import Talent
from talentshare.models.user import User
from talentshare.schemas.notification import (
    NotificationResponse, RelatedTalent, RelatedBooking,
)

logger = get_logger(__name__)
settings = get_settings()


def _build(
    user_id: int,
    notification_type: str,
    title: str,
    message: str,
    related_talent_id: Optional[int],
    related_booking_id: Optional[int],
) -> Notification:
    return Notification(
        user_id=user_id,
        type=notification_type,
        title=title,
        message=message,
        related_talent_id=related_talent_id,
        related_booking_id=related_booking_id,
        is_read=False,
    )


async def emit(
    db: AsyncSession,
    user_id: int,
    notification_type: str,
    title: str,
    message: str,
    related_talent_id: Optional[int] = None,
    related_booking_id: Optional[int] = None,
) -> Optional[Notification]:
    """Create one notification record. Returns None if it could not be stored."""
    try:
        async with db.begin_nested():
            notification = _build(
                user_id, notification_type, title, message,
                related_talent_id, related_booking_id,
            )
            db.add(notification)
            await db.flush()
    except Exception as e:  # CancelledError is a BaseException and still propagates
        logger.error(
            "notification_emit_failed",
            error_type=type(e).__name__,
            user_id=user_id,
            type=notification_type,
            related_booking_id=related_booking_id,
            error=str(e),
        )
        record_notification(notification_type, delivered=False)
        return None

    record_notification(notification_type, delivered=True)
    logger.info(
        "notification_emitted",
        notification_id=notification.id,
        user_id=user_id,
        type=notification_type,
    )
    return notification


async def _resolve_references(
    db: AsyncSession, notifications: list[Notification]
) -> list[NotificationResponse]:
    """Attach weakly referenced talents/bookings; missing targets are marked unavailable."""
    talent_ids = {n.related_talent_id for n in notifications if n.related_talent_id}
    booking_ids = {n.related_booking_id for n in notifications if n.related_booking_id}

    talent_titles: dict[int, str] = {}
    if talent_ids:
        rows = await db.execute(select(Talent.id, Talent.title).where(Talent.id.in_(talent_ids)))
        talent_titles = {row.id: row.title for row in rows}

    booking_statuses: dict[int, str] = {}
    if booking_ids:
        rows = await db.execute(select(Booking.id, Booking.status).where(Booking.id.in_(booking_ids)))
        booking_statuses = {row.id: row.status for row in rows}

    items = []
    for n in notifications:
        item = NotificationResponse.model_validate(n)
        if n.related_talent_id:
            title = talent_titles.get(n.related_talent_id)
            item.related_talent = RelatedTalent(
                id=n.related_talent_id, title=title, available=title is not None
            )
        if n.related_booking_id:
            booking_status = booking_statuses.get(n.related_booking_id)
            item.related_booking = RelatedBooking(
                id=n.related_booking_id,
                status=booking_status,
                available=booking_status is not None,
            )
        items.append(item)
    return items


async def list_notifications(
    db: AsyncSession, user: User, unread_only: bool = False
) -> list[NotificationResponse]:
    """Newest first, capped at NOTIFICATION_LIST_LIMIT."""
    query = select(Notification).where(Notification.user_id == user.id)
    if unread_only:
        query = query.where(Notification.is_read.is_(False))

    result = await db.execute(
        query
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(settings.NOTIFICATION_LIST_LIMIT)
    )
    return await _resolve_references(db, list(result.scalars().all()))


async def unread_count(db: AsyncSession, user: User) -> int:
    result = await db.execute(
        select(func.count(Notification.id)).where(
            Notification.user_id == user.id,
            Notification.is_read.is_(False),
        )
    )
    return int(result.scalar_one())


async def _get_owned(db: AsyncSession, notification_id: int, user: User) -> Notification:
    result = await db.execute(select(Notification).where(Notification.id == notification_id))
    notification = result.scalar_one_or_none()

    if not notification:
        raise NotFoundError("Notification not found")
    if notification.user_id != user.id:
        raise ForbiddenError("You do not have access to this notification")
    return notification


async def mark_read(db: AsyncSession, notification_id: int, user: User) -> NotificationResponse:
    notification = await _get_owned(db, notification_id, user)
    notification.is_read = True
    await db.flush()
    await db.refresh(notification)
    return (await _resolve_references(db, [notification]))[0]


async def mark_all_read(db: AsyncSession, user: User) -> int:
    result = await db.execute(
        update(Notification)
        .where(Notification.user_id == user.id, Notification.is_read.is_(False))
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    logger.info("notifications_marked_read", user_id=user.id, updated=result.rowcount)
    return result.rowcount


async def delete_notification(db: AsyncSession, notification_id: int, user: User) -> None:
    notification = await _get_owned(db, notification_id, user)
    await db.delete(notification)
    await db.flush()
    logger.info("notification_deleted", notification_id=notification_id, user_id=user.id)
