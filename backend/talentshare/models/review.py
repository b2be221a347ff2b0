"""
Review model: at most one per booking.

`provider_id` is captured from the talent owner when the review is created
and is never re-derived.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship

from talentshare.db.base import Base, TimestampMixin


class Review(Base, TimestampMixin):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, unique=True)
    talent_id = Column(Integer, ForeignKey("talents.id"), nullable=False)
    reviewer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    provider_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(String(500), nullable=False)

    reviewer = relationship("User", foreign_keys=[reviewer_id], lazy="selectin")
    talent = relationship("Talent", lazy="selectin")

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="check_review_rating_range"),
        Index("ix_reviews_talent_created", "talent_id", "created_at"),
        Index("ix_reviews_provider_created", "provider_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, booking={self.booking_id}, rating={self.rating})>"
