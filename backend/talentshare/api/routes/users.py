"""
Endpoints scoped to the authenticated user: profile, own talents,
bookings received on own talents.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from talentshare.db.session import get_db
from talentshare.core.security import get_current_user
from talentshare.models.user import User
from talentshare.schemas.booking import BookingDetailResponse
from talentshare.schemas.common import Envelope, ListEnvelope
from talentshare.schemas.talent import TalentResponse
from talentshare.schemas.user import ProfileUpdate, UserResponse
from talentshare.services import auth_service, booking_service, talent_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.put("/profile", response_model=Envelope[UserResponse])
async def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    user = await auth_service.update_profile(db, user, payload)
    return Envelope(data=UserResponse.model_validate(user))


@router.get("/my-talents", response_model=ListEnvelope[TalentResponse])
async def my_talents(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    talents = await talent_service.list_owner_talents(db, user)
    return ListEnvelope(count=len(talents), data=[TalentResponse.model_validate(t) for t in talents])


@router.get("/received-bookings", response_model=ListEnvelope[BookingDetailResponse])
async def received_bookings(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Bookings other users made on the caller's talents."""
    bookings = await booking_service.get_received_bookings(db, user)
    return ListEnvelope(
        count=len(bookings),
        data=[BookingDetailResponse.model_validate(b) for b in bookings],
    )
