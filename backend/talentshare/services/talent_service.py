"""
Talent catalog: listing CRUD, filtered search and slot management.

Deleting a talent is an explicit, ordered sequence inside the request
transaction (the store does not cascade for us):

  1. notify every user holding an active booking (best effort)
  2. delete reviews written for the talent
  3. delete its bookings
  4. delete its slots
  5. delete the talent
"""

from datetime import date
from typing import Optional

from sqlalchemy import select, delete, or_
from sqlalchemy.ext.asyncio import AsyncSession

from talentshare.core.exceptions import NotFoundError, ForbiddenError, BusinessValidationError
from talentshare.core.logging import get_logger
from talentshare.models.booking import Booking, BookingStatus
from talentshare.models.notification import NotificationType
from talentshare.models.review import Review
from talentshare.models.slot import Slot
from talentshare.models.talent import Talent
from talentshare.models.user import User
from talentshare.schemas.slot import SlotCreate
from talentshare.schemas.talent import TalentCreate, TalentUpdate
from talentshare.services import capacity_ledger, notification_service

logger = get_logger(__name__)

NULLABLE_FIELDS = ("location", "image")


def _check_location(is_online: bool, location: Optional[str]) -> None:
    if not is_online and not (location and location.strip()):
        raise BusinessValidationError("Location is required for offline talents")


def _check_slot_date(slot_data: SlotCreate) -> None:
    if slot_data.date < date.today():
        raise BusinessValidationError("Slot date can not be in the past")


async def get_talent(db: AsyncSession, talent_id: int) -> Talent:
    talent = await db.get(Talent, talent_id)
    if not talent:
        raise NotFoundError(f"Talent {talent_id} not found")
    return talent


async def _get_owned_talent(db: AsyncSession, talent_id: int, owner: User) -> Talent:
    talent = await get_talent(db, talent_id)
    if talent.owner_id != owner.id:
        raise ForbiddenError("You do not own this talent")
    return talent


async def list_slots(db: AsyncSession, talent_id: int) -> list[Slot]:
    """Slots ordered by date, then start time."""
    await get_talent(db, talent_id)
    result = await db.execute(
        select(Slot)
        .where(Slot.talent_id == talent_id)
        .order_by(Slot.date.asc(), Slot.start_time.asc())
    )
    return list(result.scalars().all())


async def list_talents(
    db: AsyncSession,
    category: Optional[str] = None,
    location: Optional[str] = None,
    search: Optional[str] = None,
    is_online: Optional[bool] = None,
) -> list[Talent]:
    """Newest first. Location and search are case-insensitive substring matches."""
    query = select(Talent)

    if category:
        query = query.where(Talent.category == category)
    if location:
        query = query.where(Talent.location.ilike(f"%{location}%"))
    if is_online is not None:
        query = query.where(Talent.is_online == is_online)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(Talent.title.ilike(pattern), Talent.description.ilike(pattern)))

    result = await db.execute(query.order_by(Talent.created_at.desc(), Talent.id.desc()))
    return list(result.scalars().all())


async def list_owner_talents(db: AsyncSession, owner: User) -> list[Talent]:
    result = await db.execute(
        select(Talent)
        .where(Talent.owner_id == owner.id)
        .order_by(Talent.created_at.desc(), Talent.id.desc())
    )
    return list(result.scalars().all())


async def create_talent(db: AsyncSession, owner: User, data: TalentCreate) -> Talent:
    """Create a talent together with its initial slots (at least one)."""
    if not data.slots:
        raise BusinessValidationError("Add at least one slot")
    _check_location(data.is_online, data.location)
    for slot_data in data.slots:
        _check_slot_date(slot_data)

    talent = Talent(
        owner_id=owner.id,
        title=data.title.strip(),
        description=data.description,
        category=data.category.value,
        location=data.location,
        is_online=data.is_online,
        max_participants=data.max_participants,
        image=data.image,
    )
    db.add(talent)
    await db.flush()

    for slot_data in data.slots:
        db.add(
            Slot(
                talent_id=talent.id,
                date=slot_data.date,
                start_time=slot_data.start_time,
                end_time=slot_data.end_time,
                current_participants=0,
            )
        )
    await db.flush()
    await db.refresh(talent)

    logger.info(
        "talent_created",
        talent_id=talent.id,
        owner_id=owner.id,
        slots=len(data.slots),
    )
    return talent


async def update_talent(
    db: AsyncSession, talent_id: int, owner: User, data: TalentUpdate
) -> Talent:
    talent = await _get_owned_talent(db, talent_id, owner)
    changes = data.model_dump(exclude_unset=True)

    # Explicit nulls only clear the nullable fields
    changes = {
        field: value
        for field, value in changes.items()
        if value is not None or field in NULLABLE_FIELDS
    }

    is_online = changes.get("is_online", talent.is_online)
    location = changes["location"] if "location" in changes else talent.location
    _check_location(is_online, location)

    if "max_participants" in changes:
        busiest = await capacity_ledger.max_active_participants(db, talent.id)
        if changes["max_participants"] < busiest:
            raise BusinessValidationError(
                f"Max participants can not be lower than existing bookings ({busiest})"
            )

    for field, value in changes.items():
        if field == "category":
            value = value.value
        setattr(talent, field, value)

    await db.flush()
    await db.refresh(talent)
    logger.info("talent_updated", talent_id=talent.id, fields=sorted(changes))
    return talent


async def delete_talent(db: AsyncSession, talent_id: int, owner: User) -> None:
    talent = await _get_owned_talent(db, talent_id, owner)

    result = await db.execute(
        select(Booking).where(
            Booking.talent_id == talent.id,
            Booking.status != BookingStatus.CANCELLED,
        )
    )
    active = list(result.scalars().all())

    for user_id in sorted({b.user_id for b in active}):
        await notification_service.emit(
            db,
            user_id=user_id,
            notification_type=NotificationType.TALENT_DELETED,
            title="Class removed",
            message=f'"{talent.title}" was removed by its owner. Your booking no longer applies.',
            related_talent_id=talent.id,
        )

    await db.execute(delete(Review).where(Review.talent_id == talent.id))
    await db.execute(delete(Booking).where(Booking.talent_id == talent.id))
    await db.execute(delete(Slot).where(Slot.talent_id == talent.id))
    await db.delete(talent)
    await db.flush()

    logger.info(
        "talent_deleted",
        talent_id=talent_id,
        owner_id=owner.id,
        notified=len({b.user_id for b in active}),
    )


async def add_slot(db: AsyncSession, talent_id: int, owner: User, data: SlotCreate) -> Slot:
    talent = await _get_owned_talent(db, talent_id, owner)
    _check_slot_date(data)

    slot = Slot(
        talent_id=talent.id,
        date=data.date,
        start_time=data.start_time,
        end_time=data.end_time,
        current_participants=0,
    )
    db.add(slot)
    await db.flush()
    await db.refresh(slot)

    logger.info("slot_created", slot_id=slot.id, talent_id=talent.id, date=str(slot.date))
    return slot
