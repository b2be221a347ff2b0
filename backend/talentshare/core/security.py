"""
Password hashing, JWT issuing and the identity-check dependency.

The identity check resolves a bearer credential to a User and hands it to
the route, which passes it explicitly into every service call. Nothing about
the caller is kept in module or global state.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from talentshare.core.config import get_settings
from talentshare.core.exceptions import UnauthenticatedError
from talentshare.core.logging import get_logger
from talentshare.db.session import get_db
from talentshare.models.user import User

logger = get_logger(__name__)
settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# auto_error=False: a missing header must surface as our own 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return str(pwd_context.hash(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bool(pwd_context.verify(plain_password, hashed_password))
    except (ValueError, TypeError) as e:
        logger.error("password_verify_error", error=str(e))
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a signed access token.

    Args:
        data: Claims to embed; ``sub`` must hold the user id as a string
        expires_delta: Override for the configured lifetime

    Returns:
        Encoded JWT
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify a token. Raises UnauthenticatedError on any failure."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthenticatedError("Token has expired", code="TOKEN_EXPIRED")
    except jwt.PyJWTError:
        raise UnauthenticatedError("Invalid authentication credentials", code="TOKEN_INVALID")


def _user_id_from_claims(claims: dict[str, Any]) -> int:
    subject = claims.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        raise UnauthenticatedError("Invalid authentication credentials", code="TOKEN_INVALID")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer credential to an active user or fail with 401."""
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Authentication required", code="TOKEN_MISSING")

    claims = decode_access_token(credentials.credentials)
    user_id = _user_id_from_claims(claims)

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        logger.warning("auth_user_missing", user_id=user_id)
        raise UnauthenticatedError("User not found", code="USER_NOT_FOUND")

    return user
