"""
Pydantic schemas for notifications.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class RelatedTalent(BaseModel):
    id: int
    title: Optional[str] = None
    available: bool = True


class RelatedBooking(BaseModel):
    id: int
    status: Optional[str] = None
    available: bool = True


class NotificationResponse(BaseModel):
    id: int
    user_id: int
    type: str
    title: str
    message: str
    is_read: bool
    related_talent_id: Optional[int] = None
    related_booking_id: Optional[int] = None
    related_talent: Optional[RelatedTalent] = None
    related_booking: Optional[RelatedBooking] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationListResponse(BaseModel):
    success: bool = True
    count: int
    unread_count: int
    data: list[NotificationResponse]


class UnreadCountResponse(BaseModel):
    success: bool = True
    count: int
