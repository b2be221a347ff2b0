"""
Pydantic schemas for talent listings.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from talentshare.models.talent import TalentCategory
from talentshare.schemas.slot import SlotCreate, SlotResponse
from talentshare.schemas.user import UserContact


class TalentBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    category: TalentCategory
    location: Optional[str] = Field(None, max_length=200)
    is_online: bool = False
    max_participants: int = Field(..., ge=1)
    image: Optional[str] = Field(None, max_length=500)


class TalentCreate(TalentBase):
    slots: list[SlotCreate] = Field(default_factory=list)


class TalentUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=1000)
    category: Optional[TalentCategory] = None
    location: Optional[str] = Field(None, max_length=200)
    is_online: Optional[bool] = None
    max_participants: Optional[int] = Field(None, ge=1)
    image: Optional[str] = Field(None, max_length=500)


class TalentResponse(BaseModel):
    id: int
    owner_id: int
    title: str
    description: str
    category: str
    location: Optional[str]
    is_online: bool
    max_participants: int
    image: Optional[str]
    owner: UserContact
    created_at: datetime

    model_config = {"from_attributes": True}


class TalentDetailResponse(TalentResponse):
    slots: list[SlotResponse] = []


class TalentSummary(BaseModel):
    id: int
    title: str
    category: str
    location: Optional[str]
    is_online: bool
    max_participants: int
    owner: UserContact

    model_config = {"from_attributes": True}
