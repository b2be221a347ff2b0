"""
Pydantic schemas for reviews.

Rating and comment bounds are checked by review_service so that the same
rules apply to every caller; the request models only fix the types.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from talentshare.schemas.user import UserPublic


class ReviewCreate(BaseModel):
    booking_id: int
    rating: int
    comment: str


class ReviewUpdate(BaseModel):
    rating: Optional[int] = None
    comment: Optional[str] = None


class ReviewTalent(BaseModel):
    id: int
    title: str

    model_config = {"from_attributes": True}


class ReviewResponse(BaseModel):
    id: int
    booking_id: int
    talent_id: int
    reviewer_id: int
    provider_id: int
    rating: int
    comment: str
    reviewer: UserPublic
    talent: ReviewTalent
    created_at: datetime

    model_config = {"from_attributes": True}


class ReviewListResponse(BaseModel):
    success: bool = True
    count: int
    average_rating: float
    data: list[ReviewResponse]


class CanReviewResponse(BaseModel):
    success: bool = True
    can_review: bool
    reason: Optional[str] = None
    review_id: Optional[int] = None
