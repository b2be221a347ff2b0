"""
Talent model: a published offer to teach a skill, owned by one user.

Key design decisions:
- `category` is a closed enumeration enforced by a CHECK constraint
- `location` is nullable at the storage level; the "offline talents need a
  location" rule lives in the service layer because it spans two columns
  that can be edited independently
- No ON DELETE cascade: deleting a talent is an explicit application-level
  sequence in talent_service.delete_talent
"""

import enum

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship

from talentshare.db.base import Base, TimestampMixin


class TalentCategory(str, enum.Enum):
    PROGRAMMING = "programming"
    DESIGN = "design"
    LANGUAGE = "language"
    MUSIC = "music"
    SPORTS = "sports"
    COOKING = "cooking"
    PHOTO_VIDEO = "photo_video"
    MARKETING = "marketing"
    WRITING = "writing"
    OTHER = "other"


_CATEGORY_VALUES = ", ".join(f"'{c.value}'" for c in TalentCategory)


class Talent(Base, TimestampMixin):
    __tablename__ = "talents"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    description = Column(String(1000), nullable=False)
    category = Column(String(30), nullable=False)
    location = Column(String(200), nullable=True)
    is_online = Column(Boolean, nullable=False, default=False)
    max_participants = Column(Integer, nullable=False)
    image = Column(String(500), nullable=True)

    # Relationships
    owner = relationship("User", lazy="selectin")

    __table_args__ = (
        CheckConstraint("max_participants > 0", name="check_talent_max_participants_positive"),
        CheckConstraint(f"category IN ({_CATEGORY_VALUES})", name="check_talent_category"),
        Index("ix_talents_category_created", "category", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Talent(id={self.id}, title={self.title}, max={self.max_participants})>"
