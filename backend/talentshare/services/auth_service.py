"""
Authentication service handling signup, login and account maintenance.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from talentshare.models.user import User
from talentshare.schemas.user import UserCreate, UserLogin, ProfileUpdate
from talentshare.core.exceptions import ConflictError, UnauthenticatedError, EMAIL_TAKEN
from talentshare.core.security import hash_password, verify_password, create_access_token
from talentshare.core.logging import get_logger

logger = get_logger(__name__)


def issue_token(user: User) -> str:
    return create_access_token(data={"sub": str(user.id)})


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Register a new user with hashed password.
    Raises EMAIL_TAKEN if the email already exists.
    """
    result = await db.execute(select(User).where(User.email == user_data.email))
    if result.scalar_one_or_none():
        logger.warning("registration_failed", reason="email_exists", email=user_data.email)
        raise ConflictError("Email is already registered", code=EMAIL_TAKEN)

    user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.info("user_registered", user_id=user.id, email=user.email)
    return user


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> User:
    """
    Check credentials and return the user.
    Raises UnauthenticatedError if they are invalid.
    """
    result = await db.execute(select(User).where(User.email == login_data.email.lower()))
    user = result.scalar_one_or_none()

    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning("login_failed", email=login_data.email)
        raise UnauthenticatedError("Invalid email or password", code="INVALID_CREDENTIALS")

    if not user.is_active:
        raise UnauthenticatedError("Account is deactivated", code="ACCOUNT_INACTIVE")

    logger.info("user_logged_in", user_id=user.id)
    return user


async def change_password(
    db: AsyncSession, user: User, current_password: str, new_password: str
) -> None:
    if not verify_password(current_password, user.hashed_password):
        raise UnauthenticatedError("Current password is incorrect", code="INVALID_CREDENTIALS")

    user.hashed_password = hash_password(new_password)
    await db.flush()
    logger.info("password_changed", user_id=user.id)


async def update_profile(db: AsyncSession, user: User, data: ProfileUpdate) -> User:
    changes: dict[str, Optional[str]] = data.model_dump(exclude_unset=True)
    if changes.get("name") is not None:
        user.name = changes["name"]
    if "profile_image" in changes:
        user.profile_image = changes["profile_image"]

    await db.flush()
    await db.refresh(user)
    logger.info("profile_updated", user_id=user.id, fields=sorted(changes))
    return user
