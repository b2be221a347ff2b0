"""
Capacity ledger: owns Slot.current_participants.

INVARIANT
=========

  slot.current_participants == count(bookings WHERE slot_id = slot.id
                                     AND status != 'cancelled')

The counter is a materialised aggregate. It is recomputed by a full COUNT
after every booking mutation instead of being incremented or decremented
in place, which makes it self-correcting against any missed update.

ADMISSION
=========

Checking `current_participants < max_participants` and then inserting a
booking is a read-then-write race: two requests can both see one free seat.
`admit()` closes it with a single conditional UPDATE inside the booking
transaction:

  UPDATE slots SET current_participants = current_participants + 1
  WHERE id = :slot_id AND current_participants < :max_participants

The row lock taken by the UPDATE serialises concurrent admissions for the
same slot. If no row was affected the slot is full. The booking insert and
`recompute()` run in the same transaction, so the provisional +1 is replaced
by the authoritative count before commit, and a rollback discards both.

Nothing outside this module writes current_participants.
"""

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from talentshare.core.exceptions import ConflictError, CAPACITY_EXCEEDED
from talentshare.core.logging import get_logger
from talentshare.core.metrics import capacity_recomputes, record_admission
from talentshare.models.booking import Booking, BookingStatus
from talentshare.models.slot import Slot
from talentshare.models.talent import Talent

logger = get_logger(__name__)


async def count_active_bookings(db: AsyncSession, slot_id: int) -> int:
    result = await db.execute(
        select(func.count(Booking.id)).where(
            Booking.slot_id == slot_id,
            Booking.status != BookingStatus.CANCELLED,
        )
    )
    return int(result.scalar_one())


async def recompute(db: AsyncSession, slot_id: int) -> int:
    """
    Recount non-cancelled bookings for a slot and store the result.
    Idempotent: calling it twice in a row stores the same value.
    """
    await db.flush()
    count = await count_active_bookings(db, slot_id)
    await db.execute(
        update(Slot)
        .where(Slot.id == slot_id)
        .values(current_participants=count)
        .execution_options(synchronize_session="fetch")
    )
    capacity_recomputes.inc()
    logger.debug("capacity_recomputed", slot_id=slot_id, current_participants=count)
    return count


def check_capacity(slot: Slot, talent: Talent) -> None:
    """Advisory read check; admit() is the authoritative gate."""
    if slot.current_participants >= talent.max_participants:
        logger.info(
            "booking_rejected_full",
            slot_id=slot.id,
            current=slot.current_participants,
            max=talent.max_participants,
        )
        raise ConflictError("This slot is fully booked", code=CAPACITY_EXCEEDED)


async def admit(db: AsyncSession, slot_id: int, max_participants: int) -> None:
    """
    Atomically claim one seat on the slot or fail with CAPACITY_EXCEEDED.
    Must run in the same transaction as the booking insert.
    """
    result = await db.execute(
        update(Slot)
        .where(
            Slot.id == slot_id,
            Slot.current_participants < max_participants,
        )
        .values(current_participants=Slot.current_participants + 1)
        .execution_options(synchronize_session=False)
    )

    admitted = result.rowcount == 1
    record_admission(admitted)
    if not admitted:
        logger.warning("admission_rejected", slot_id=slot_id, max=max_participants)
        raise ConflictError("This slot is fully booked", code=CAPACITY_EXCEEDED)


async def max_active_participants(db: AsyncSession, talent_id: int) -> int:
    """Highest current_participants across a talent's slots (0 if none)."""
    result = await db.execute(
        select(func.max(Slot.current_participants)).where(Slot.talent_id == talent_id)
    )
    return int(result.scalar_one_or_none() or 0)
