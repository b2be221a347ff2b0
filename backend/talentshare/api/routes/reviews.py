"""
Review endpoints. Writing requires a confirmed booking owned by the caller;
reading talent/provider reviews is public.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from talentshare.db.session import get_db
from talentshare.core.security import get_current_user
from talentshare.models.user import User
from talentshare.schemas.common import Envelope, ListEnvelope, MessageResponse
from talentshare.schemas.review import (
    ReviewCreate, ReviewUpdate, ReviewResponse, ReviewListResponse, CanReviewResponse,
)
from talentshare.services import review_service

router = APIRouter(prefix="/reviews", tags=["Reviews"])


def _aggregate(reviews) -> ReviewListResponse:
    return ReviewListResponse(
        count=len(reviews),
        average_rating=review_service.average_rating(reviews),
        data=[ReviewResponse.model_validate(r) for r in reviews],
    )


@router.post("/", response_model=Envelope[ReviewResponse], status_code=status.HTTP_201_CREATED)
async def create_review_endpoint(
    payload: ReviewCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    review = await review_service.create_review(
        db, user, payload.booking_id, payload.rating, payload.comment
    )
    return Envelope(data=ReviewResponse.model_validate(review))


@router.get("/my-reviews", response_model=ListEnvelope[ReviewResponse])
async def my_reviews_endpoint(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    reviews = await review_service.get_my_reviews(db, user)
    return ListEnvelope(count=len(reviews), data=[ReviewResponse.model_validate(r) for r in reviews])


@router.get("/can-review/{booking_id}", response_model=CanReviewResponse)
async def can_review_endpoint(
    booking_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    eligibility = await review_service.can_review(db, booking_id, user)
    return CanReviewResponse(
        can_review=eligibility.can_review,
        reason=eligibility.reason,
        review_id=eligibility.review_id,
    )


@router.get("/talent/{talent_id}", response_model=ReviewListResponse)
async def talent_reviews_endpoint(talent_id: int, db: AsyncSession = Depends(get_db)):
    return _aggregate(await review_service.get_talent_reviews(db, talent_id))


@router.get("/provider/{provider_id}", response_model=ReviewListResponse)
async def provider_reviews_endpoint(provider_id: int, db: AsyncSession = Depends(get_db)):
    return _aggregate(await review_service.get_provider_reviews(db, provider_id))


@router.put("/{review_id}", response_model=Envelope[ReviewResponse])
async def update_review_endpoint(
    review_id: int,
    payload: ReviewUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    review = await review_service.update_review(
        db, review_id, user, rating=payload.rating, comment=payload.comment
    )
    return Envelope(data=ReviewResponse.model_validate(review))


@router.delete("/{review_id}", response_model=MessageResponse)
async def delete_review_endpoint(
    review_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await review_service.delete_review(db, review_id, user)
    return MessageResponse(message="Review deleted")
