"""
Notification model: an event record addressed to one user.

`related_talent_id` / `related_booking_id` are weak references. They carry
no foreign key because the referenced rows may be deleted later; readers
must tolerate a missing target.
"""

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Index, CheckConstraint

from talentshare.db.base import Base, TimestampMixin


class NotificationType:
    BOOKING_CREATED = "booking_created"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_CONFIRMED = "booking_confirmed"
    TALENT_DELETED = "talent_deleted"
    REVIEW_RECEIVED = "review_received"

    ALL = (BOOKING_CREATED, BOOKING_CANCELLED, BOOKING_CONFIRMED, TALENT_DELETED, REVIEW_RECEIVED)


_TYPE_VALUES = ", ".join(f"'{t}'" for t in NotificationType.ALL)


class Notification(Base, TimestampMixin):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(30), nullable=False)
    title = Column(String(200), nullable=False)
    message = Column(String(2000), nullable=False)
    related_talent_id = Column(Integer, nullable=True)
    related_booking_id = Column(Integer, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        CheckConstraint(f"type IN ({_TYPE_VALUES})", name="check_notification_type"),
        # Covers "my unread notifications, newest first"
        Index("ix_notifications_user_read_created", "user_id", "is_read", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, user={self.user_id}, type={self.type}, read={self.is_read})>"
