"""
Review gate: one review per confirmed booking, written by its requester.

Eligibility chain (shared by create() and can_review()):

  booking exists          NotFound
  caller owns booking     Forbidden
  booking confirmed       INVALID_STATE
  not reviewed yet        DUPLICATE_REVIEW

A confirmed booking is reviewable as soon as it is confirmed, even before
the slot date; there is no separate "completed" state.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from talentshare.core.config import get_settings
from talentshare.core.exceptions import (
    NotFoundError,
    ForbiddenError,
    ConflictError,
    BusinessValidationError,
    InvalidStateError,
    DUPLICATE_REVIEW,
)
from talentshare.core.logging import get_logger
from talentshare.core.metrics import reviews_created
from talentshare.models.booking import Booking, BookingStatus
from talentshare.models.notification import NotificationType
from talentshare.models.review import Review
from talentshare.models.user import User
from talentshare.services import notification_service

logger = get_logger(__name__)
settings = get_settings()

REASON_ALREADY_REVIEWED = "already reviewed"
REASON_NOT_CONFIRMED = "booking is not confirmed"


@dataclass
class ReviewEligibility:
    can_review: bool
    reason: Optional[str] = None
    review_id: Optional[int] = None


def validate_rating(rating: Optional[int]) -> None:
    if rating is None or isinstance(rating, bool) or not isinstance(rating, int):
        raise BusinessValidationError("Rating is required")
    if rating < 1 or rating > 5:
        raise BusinessValidationError("Rating must be between 1 and 5")


def validate_comment(comment: Optional[str]) -> None:
    if comment is None or not comment.strip():
        raise BusinessValidationError("Comment is required")
    if len(comment) > settings.REVIEW_COMMENT_MAX_LENGTH:
        raise BusinessValidationError(
            f"Comment can not exceed {settings.REVIEW_COMMENT_MAX_LENGTH} characters"
        )


async def _get_booking(db: AsyncSession, booking_id: int) -> Booking:
    booking = await db.get(Booking, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


async def _existing_review(db: AsyncSession, booking_id: int) -> Optional[Review]:
    result = await db.execute(select(Review).where(Review.booking_id == booking_id))
    return result.scalar_one_or_none()


async def _load_review(db: AsyncSession, review_id: int) -> Review:
    result = await db.execute(
        select(Review)
        .where(Review.id == review_id)
        .execution_options(populate_existing=True)
    )
    review = result.scalar_one_or_none()
    if not review:
        raise NotFoundError("Review not found")
    return review


async def can_review(db: AsyncSession, booking_id: int, caller: User) -> ReviewEligibility:
    """Read-only evaluation of the eligibility chain."""
    booking = await _get_booking(db, booking_id)
    if booking.user_id != caller.id:
        raise ForbiddenError("This booking is not yours")

    existing = await _existing_review(db, booking_id)
    if existing:
        return ReviewEligibility(False, REASON_ALREADY_REVIEWED, existing.id)

    if booking.status != BookingStatus.CONFIRMED:
        return ReviewEligibility(False, REASON_NOT_CONFIRMED)

    return ReviewEligibility(True)


async def create_review(
    db: AsyncSession,
    reviewer: User,
    booking_id: int,
    rating: int,
    comment: str,
) -> Review:
    booking = await _get_booking(db, booking_id)

    if booking.user_id != reviewer.id:
        raise ForbiddenError("You can only review your own bookings")

    if booking.status != BookingStatus.CONFIRMED:
        raise InvalidStateError("Only confirmed bookings can be reviewed")

    if await _existing_review(db, booking_id):
        raise ConflictError("You have already reviewed this booking", code=DUPLICATE_REVIEW)

    validate_rating(rating)
    validate_comment(comment)

    talent = booking.talent
    review = Review(
        booking_id=booking.id,
        talent_id=talent.id,
        reviewer_id=reviewer.id,
        provider_id=talent.owner_id,
        rating=rating,
        comment=comment,
    )
    db.add(review)
    try:
        await db.flush()
    except IntegrityError:
        raise ConflictError("You have already reviewed this booking", code=DUPLICATE_REVIEW)

    reviews_created.inc()
    logger.info(
        "review_created",
        review_id=review.id,
        booking_id=booking.id,
        talent_id=talent.id,
        rating=rating,
    )

    await notification_service.emit(
        db,
        user_id=talent.owner_id,
        notification_type=NotificationType.REVIEW_RECEIVED,
        title="New review",
        message=f'You received a {rating}-star review for "{talent.title}".',
        related_talent_id=talent.id,
        related_booking_id=booking.id,
    )
    return await _load_review(db, review.id)


async def _get_own_review(db: AsyncSession, review_id: int, reviewer: User) -> Review:
    review = await _load_review(db, review_id)
    if review.reviewer_id != reviewer.id:
        raise ForbiddenError("You can only modify your own reviews")
    return review


async def update_review(
    db: AsyncSession,
    review_id: int,
    reviewer: User,
    rating: Optional[int] = None,
    comment: Optional[str] = None,
) -> Review:
    review = await _get_own_review(db, review_id, reviewer)

    if rating is not None:
        validate_rating(rating)
        review.rating = rating
    if comment is not None:
        validate_comment(comment)
        review.comment = comment

    await db.flush()
    logger.info("review_updated", review_id=review.id)
    return await _load_review(db, review.id)


async def delete_review(db: AsyncSession, review_id: int, reviewer: User) -> None:
    review = await _get_own_review(db, review_id, reviewer)
    await db.delete(review)
    await db.flush()
    logger.info("review_deleted", review_id=review_id)


def average_rating(reviews: list[Review]) -> float:
    if not reviews:
        return 0.0
    return round(sum(r.rating for r in reviews) / len(reviews), 1)


async def get_talent_reviews(db: AsyncSession, talent_id: int) -> list[Review]:
    result = await db.execute(
        select(Review)
        .where(Review.talent_id == talent_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return list(result.scalars().all())


async def get_provider_reviews(db: AsyncSession, provider_id: int) -> list[Review]:
    result = await db.execute(
        select(Review)
        .where(Review.provider_id == provider_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return list(result.scalars().all())


async def get_my_reviews(db: AsyncSession, reviewer: User) -> list[Review]:
    result = await db.execute(
        select(Review)
        .where(Review.reviewer_id == reviewer.id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return list(result.scalars().all())
