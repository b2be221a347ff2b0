"""
Booking lifecycle: create, cancel, status update and reads.

STATE MACHINE
=============

  (nonexistent) --create--> confirmed --cancel--> cancelled

Nothing leaves `cancelled` and nothing ever reaches `pending`. Cancellation
is a soft status flip; rows are kept for history and for the review link.

CREATE SEQUENCE
===============

  1. talent exists                     NotFound
  2. slot exists                       NotFound
  3. slot belongs to talent            INVALID_SLOT
  4. caller is not the talent owner    SELF_BOOKING_FORBIDDEN
  5. slot not full (read check)        CAPACITY_EXCEEDED
  6. no earlier booking of this slot   DUPLICATE_BOOKING
  7. admit (conditional +1) + insert   CAPACITY_EXCEEDED / DUPLICATE_BOOKING
  8. recompute ledger
  9. notify owner and requester        best effort, never fails the booking

Steps 7-8 run in the request transaction (see db/session.get_db), so a
failure anywhere up to the commit leaves neither a booking nor a changed
counter behind. The (user_id, slot_id) unique constraint turns a duplicate
race into an IntegrityError, which is reported as DUPLICATE_BOOKING.
"""

import time

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from talentshare.core.exceptions import (
    NotFoundError,
    ForbiddenError,
    ConflictError,
    BusinessValidationError,
    InvalidStateError,
    DUPLICATE_BOOKING,
    SELF_BOOKING_FORBIDDEN,
    INVALID_SLOT,
)
from talentshare.core.logging import get_logger
from talentshare.core.metrics import booking_latency, booking_cancellations, record_booking_attempt
from talentshare.models.booking import Booking, BookingStatus
from talentshare.models.notification import NotificationType
from talentshare.models.slot import Slot
from talentshare.models.talent import Talent
from talentshare.models.user import User
from talentshare.services import capacity_ledger, notification_service

logger = get_logger(__name__)


def _slot_label(slot: Slot) -> str:
    return f"{slot.date.isoformat()} {slot.start_time}"


async def _load_booking(db: AsyncSession, booking_id: int) -> Booking:
    """Fetch a booking with user, talent (and owner) and slot populated."""
    result = await db.execute(
        select(Booking)
        .where(Booking.id == booking_id)
        .execution_options(populate_existing=True)
    )
    booking = result.scalar_one_or_none()
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


async def create_booking(
    db: AsyncSession,
    requester: User,
    talent_id: int,
    slot_id: int,
) -> Booking:
    """Book one seat on a slot for the requester."""
    start = time.perf_counter()
    try:
        booking = await _create_booking(db, requester, talent_id, slot_id)
    except (ConflictError, BusinessValidationError):
        record_booking_attempt("conflict")
        raise
    except NotFoundError:
        record_booking_attempt("error")
        raise
    booking_latency.observe(time.perf_counter() - start)
    record_booking_attempt("success")
    return booking


async def _create_booking(
    db: AsyncSession,
    requester: User,
    talent_id: int,
    slot_id: int,
) -> Booking:
    talent = await db.get(Talent, talent_id)
    if not talent:
        raise NotFoundError(f"Talent {talent_id} not found")

    slot = await db.get(Slot, slot_id)
    if not slot:
        raise NotFoundError(f"Slot {slot_id} not found")

    if slot.talent_id != talent.id:
        raise BusinessValidationError("Slot does not belong to this talent", code=INVALID_SLOT)

    if talent.owner_id == requester.id:
        raise ConflictError("You can not book your own talent", code=SELF_BOOKING_FORBIDDEN)

    capacity_ledger.check_capacity(slot, talent)

    existing = await db.execute(
        select(Booking).where(
            Booking.user_id == requester.id,
            Booking.slot_id == slot_id,
        )
    )
    previous = existing.scalar_one_or_none()
    if previous is not None:
        if previous.is_active:
            raise ConflictError("You have already booked this slot", code=DUPLICATE_BOOKING)
        raise ConflictError(
            "You cancelled this slot earlier and can not book it again",
            code=DUPLICATE_BOOKING,
        )

    await capacity_ledger.admit(db, slot.id, talent.max_participants)

    booking = Booking(
        user_id=requester.id,
        talent_id=talent.id,
        slot_id=slot.id,
        status=BookingStatus.CONFIRMED,
    )
    db.add(booking)
    try:
        await db.flush()
    except IntegrityError:
        logger.warning(
            "booking_duplicate_race", user_id=requester.id, slot_id=slot_id
        )
        raise ConflictError("You have already booked this slot", code=DUPLICATE_BOOKING)

    await capacity_ledger.recompute(db, slot.id)

    logger.info(
        "booking_created",
        booking_id=booking.id,
        user_id=requester.id,
        talent_id=talent.id,
        slot_id=slot.id,
    )

    owner = talent.owner
    await notification_service.emit(
        db,
        user_id=talent.owner_id,
        notification_type=NotificationType.BOOKING_CREATED,
        title="New booking",
        message=(
            f'{requester.name} booked "{talent.title}" ({_slot_label(slot)}). '
            f"Contact: {requester.email}"
        ),
        related_talent_id=talent.id,
        related_booking_id=booking.id,
    )
    await notification_service.emit(
        db,
        user_id=requester.id,
        notification_type=NotificationType.BOOKING_CONFIRMED,
        title="Booking confirmed",
        message=(
            f'Your booking for "{talent.title}" ({_slot_label(slot)}) is confirmed. '
            f"Instructor contact: {owner.email}"
        ),
        related_talent_id=talent.id,
        related_booking_id=booking.id,
    )

    return await _load_booking(db, booking.id)


async def _cancel(db: AsyncSession, booking: Booking, requester: User) -> Booking:
    if booking.status == BookingStatus.CANCELLED:
        raise InvalidStateError("Booking is already cancelled")

    booking.status = BookingStatus.CANCELLED
    await db.flush()
    await capacity_ledger.recompute(db, booking.slot_id)
    booking_cancellations.inc()

    logger.info(
        "booking_cancelled",
        booking_id=booking.id,
        user_id=requester.id,
        slot_id=booking.slot_id,
    )

    talent = booking.talent
    await notification_service.emit(
        db,
        user_id=talent.owner_id,
        notification_type=NotificationType.BOOKING_CANCELLED,
        title="Booking cancelled",
        message=(
            f'{requester.name} cancelled the booking for "{talent.title}" '
            f"({_slot_label(booking.slot)})."
        ),
        related_talent_id=talent.id,
        related_booking_id=booking.id,
    )
    return await _load_booking(db, booking.id)


async def _get_own_booking(db: AsyncSession, booking_id: int, requester: User) -> Booking:
    booking = await _load_booking(db, booking_id)
    if booking.user_id != requester.id:
        raise ForbiddenError("You can only change your own bookings")
    return booking


async def cancel_booking(db: AsyncSession, booking_id: int, requester: User) -> Booking:
    """Soft-cancel a booking and release its seat."""
    booking = await _get_own_booking(db, booking_id, requester)
    return await _cancel(db, booking, requester)


async def update_booking_status(
    db: AsyncSession,
    booking_id: int,
    requester: User,
    new_status: str,
) -> Booking:
    """
    Status update restricted to the state machine: the only accepted
    transition is confirmed -> cancelled, with the same effects as cancel.
    """
    booking = await _get_own_booking(db, booking_id, requester)

    if new_status not in BookingStatus.ALL:
        raise BusinessValidationError(f"Unknown booking status: {new_status}")
    if not (booking.status == BookingStatus.CONFIRMED and new_status == BookingStatus.CANCELLED):
        raise InvalidStateError(
            f"Booking can not move from {booking.status} to {new_status}"
        )
    return await _cancel(db, booking, requester)


async def get_booking(db: AsyncSession, booking_id: int, viewer: User) -> Booking:
    """Visible to the requester and to the owner of the booked talent."""
    booking = await _load_booking(db, booking_id)
    if booking.user_id != viewer.id and booking.talent.owner_id != viewer.id:
        raise ForbiddenError("You do not have access to this booking")
    return booking


async def get_user_bookings(db: AsyncSession, user: User) -> list[Booking]:
    """All bookings made by the user, newest first."""
    result = await db.execute(
        select(Booking)
        .where(Booking.user_id == user.id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    return list(result.scalars().all())


async def get_received_bookings(db: AsyncSession, owner: User) -> list[Booking]:
    """Bookings made on talents the user owns, newest first."""
    result = await db.execute(
        select(Booking)
        .join(Talent, Talent.id == Booking.talent_id)
        .where(Talent.owner_id == owner.id)
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    return list(result.scalars().all())
