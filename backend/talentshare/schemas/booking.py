"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel

from talentshare.schemas.slot import SlotResponse
from talentshare.schemas.talent import TalentSummary
from talentshare.schemas.user import UserContact


class BookingCreate(BaseModel):
    talent_id: int
    slot_id: int


class BookingStatusUpdate(BaseModel):
    status: str


class BookingResponse(BaseModel):
    id: int
    user_id: int
    talent_id: int
    slot_id: int
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class BookingDetailResponse(BookingResponse):
    """Booking with talent and slot attached for display."""

    user: UserContact
    talent: TalentSummary
    slot: SlotResponse
