"""
Authentication endpoints: signup, login, current user, password change.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from talentshare.db.session import get_db
from talentshare.core.security import get_current_user
from talentshare.models.user import User
from talentshare.schemas.common import Envelope, MessageResponse
from talentshare.schemas.user import UserCreate, UserLogin, UserResponse, AuthResponse, PasswordChange
from talentshare.services import auth_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a new account and receive an access token."""
    user = await auth_service.register_user(db, user_data)
    return AuthResponse(
        access_token=auth_service.issue_token(user),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(login_data: UserLogin, db: AsyncSession = Depends(get_db)):
    """Authenticate and receive a JWT access token."""
    user = await auth_service.authenticate_user(db, login_data)
    return AuthResponse(
        access_token=auth_service.issue_token(user),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=Envelope[UserResponse])
async def me(user: User = Depends(get_current_user)):
    return Envelope(data=UserResponse.model_validate(user))


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    payload: PasswordChange,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await auth_service.change_password(db, user, payload.current_password, payload.new_password)
    return MessageResponse(message="Password changed")
