"""
Booking model representing a user's claim on one slot.

Key design decisions:
- Unique constraint on (user_id, slot_id) regardless of status: a user who
  cancelled can not book the same slot again
- Status field allows cancellation without deleting records
- `pending` is reserved by the schema but never written by the engine
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Index, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from talentshare.db.base import Base, TimestampMixin


class BookingStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

    ALL = (PENDING, CONFIRMED, CANCELLED)


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    talent_id = Column(Integer, ForeignKey("talents.id"), nullable=False, index=True)
    slot_id = Column(Integer, ForeignKey("slots.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED)

    # Relationships
    user = relationship("User", lazy="selectin")
    talent = relationship("Talent", lazy="selectin")
    slot = relationship("Slot", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("user_id", "slot_id", name="uq_user_slot_booking"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'cancelled')", name="check_booking_status"
        ),
        Index("ix_bookings_user_created", "user_id", "created_at"),
    )

    @property
    def is_active(self) -> bool:
        return self.status != BookingStatus.CANCELLED

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user={self.user_id}, slot={self.slot_id}, status={self.status})>"
