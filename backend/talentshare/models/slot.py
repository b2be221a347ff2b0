"""
Slot model: one bookable date/time instance of a talent.

`current_participants` is a derived counter. It is written only by the
capacity ledger (services/capacity_ledger.py) and always equals the number
of non-cancelled bookings once a booking transaction has committed.
"""

from sqlalchemy import Column, Integer, String, Date, ForeignKey, Index, CheckConstraint
from talentshare.db.base import Base, TimestampMixin


class Slot(Base, TimestampMixin):
    __tablename__ = "slots"

    id = Column(Integer, primary_key=True, index=True)
    talent_id = Column(Integer, ForeignKey("talents.id"), nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)  # HH:MM
    current_participants = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("current_participants >= 0", name="check_slot_participants_non_negative"),
        Index("ix_slots_talent_date", "talent_id", "date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Slot(id={self.id}, talent={self.talent_id}, date={self.date}, "
            f"{self.start_time}-{self.end_time}, participants={self.current_participants})>"
        )
