"""
Booking endpoints. Admission is capacity-safe under concurrent requests
(see services/capacity_ledger.py).
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from talentshare.db.session import get_db
from talentshare.core.security import get_current_user
from talentshare.models.user import User
from talentshare.schemas.booking import BookingCreate, BookingStatusUpdate, BookingDetailResponse
from talentshare.schemas.common import Envelope, ListEnvelope, MessageResponse
from talentshare.services import booking_service

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=Envelope[BookingDetailResponse], status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Book one seat on a slot.

    Fails with 400 when the slot is full, belongs to another talent, is
    already booked by the caller, or the caller owns the talent.
    """
    booking = await booking_service.create_booking(
        db, user, booking_data.talent_id, booking_data.slot_id
    )
    return Envelope(data=BookingDetailResponse.model_validate(booking))


@router.get("/", response_model=ListEnvelope[BookingDetailResponse])
async def list_user_bookings(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get all bookings for the authenticated user."""
    bookings = await booking_service.get_user_bookings(db, user)
    return ListEnvelope(
        count=len(bookings),
        data=[BookingDetailResponse.model_validate(b) for b in bookings],
    )


@router.get("/{booking_id}", response_model=Envelope[BookingDetailResponse])
async def get_booking_endpoint(
    booking_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_service.get_booking(db, booking_id, user)
    return Envelope(data=BookingDetailResponse.model_validate(booking))


@router.put("/{booking_id}", response_model=Envelope[BookingDetailResponse])
async def update_booking_endpoint(
    booking_id: int,
    payload: BookingStatusUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Only confirmed -> cancelled is accepted."""
    booking = await booking_service.update_booking_status(db, booking_id, user, payload.status)
    return Envelope(data=BookingDetailResponse.model_validate(booking))


@router.delete("/{booking_id}", response_model=MessageResponse)
async def cancel_booking_endpoint(
    booking_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a booking and release its seat. The record is kept."""
    booking = await booking_service.cancel_booking(db, booking_id, user)
    return MessageResponse(
        message="Booking cancelled",
        data={"booking_id": booking.id, "status": booking.status},
    )
