"""
Talent catalog endpoints. Listing results are cached in Redis and the cache
is dropped on every talent mutation.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from talentshare.db.session import get_db
from talentshare.core.security import get_current_user
from talentshare.core.logging import get_logger
from talentshare.models.talent import TalentCategory
from talentshare.models.user import User
from talentshare.schemas.common import Envelope, ListEnvelope, MessageResponse
from talentshare.schemas.slot import SlotCreate, SlotResponse
from talentshare.schemas.talent import TalentCreate, TalentUpdate, TalentResponse, TalentDetailResponse
from talentshare.services import cache_service, talent_service

logger = get_logger(__name__)
router = APIRouter(prefix="/talents", tags=["Talents"])


async def _detail(db: AsyncSession, talent) -> TalentDetailResponse:
    detail = TalentDetailResponse.model_validate(talent)
    slots = await talent_service.list_slots(db, talent.id)
    detail.slots = [SlotResponse.model_validate(s) for s in slots]
    return detail


@router.get("/", response_model=ListEnvelope[TalentResponse])
async def list_talents_endpoint(
    category: Optional[TalentCategory] = Query(None),
    location: Optional[str] = Query(None, max_length=200),
    search: Optional[str] = Query(None, max_length=100),
    is_online: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Filtered listing, newest first."""
    category_value = category.value if category else None
    key = cache_service.make_list_key(category_value, location, search, is_online)

    cached = await cache_service.get_cached_list(key)
    if cached is not None:
        logger.info("talents_list_cache_hit", key=key)
        return ListEnvelope(count=len(cached), data=cached)

    talents = await talent_service.list_talents(db, category_value, location, search, is_online)
    data = [TalentResponse.model_validate(t).model_dump(mode="json") for t in talents]
    await cache_service.set_cached_list(key, data)
    return ListEnvelope(count=len(data), data=data)


@router.post("/", response_model=Envelope[TalentDetailResponse], status_code=status.HTTP_201_CREATED)
async def create_talent_endpoint(
    payload: TalentCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    talent = await talent_service.create_talent(db, user, payload)
    await cache_service.invalidate_talent_cache()
    return Envelope(data=await _detail(db, talent))


@router.get("/{talent_id}", response_model=Envelope[TalentDetailResponse])
async def get_talent_endpoint(talent_id: int, db: AsyncSession = Depends(get_db)):
    """Single talent with its slots. Not cached (participant counts must be live)."""
    talent = await talent_service.get_talent(db, talent_id)
    return Envelope(data=await _detail(db, talent))


@router.put("/{talent_id}", response_model=Envelope[TalentResponse])
async def update_talent_endpoint(
    talent_id: int,
    payload: TalentUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    talent = await talent_service.update_talent(db, talent_id, user, payload)
    await cache_service.invalidate_talent_cache()
    return Envelope(data=TalentResponse.model_validate(talent))


@router.delete("/{talent_id}", response_model=MessageResponse)
async def delete_talent_endpoint(
    talent_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a talent together with its slots, bookings and reviews."""
    await talent_service.delete_talent(db, talent_id, user)
    await cache_service.invalidate_talent_cache()
    return MessageResponse(message="Talent deleted")


@router.get("/{talent_id}/slots", response_model=ListEnvelope[SlotResponse])
async def list_slots_endpoint(talent_id: int, db: AsyncSession = Depends(get_db)):
    slots = await talent_service.list_slots(db, talent_id)
    return ListEnvelope(count=len(slots), data=[SlotResponse.model_validate(s) for s in slots])


@router.post("/{talent_id}/slots", response_model=Envelope[SlotResponse], status_code=status.HTTP_201_CREATED)
async def add_slot_endpoint(
    talent_id: int,
    payload: SlotCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    slot = await talent_service.add_slot(db, talent_id, user, payload)
    return Envelope(data=SlotResponse.model_validate(slot))
