"""
Authentication endpoints: register, login, profile and logout.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from venue_booking.db.session import get_db
from venue_booking.models.user import User
from venue_booking.schemas.user import UserCreate, UserResponse, UserLogin, AuthResponse
from venue_booking.services.auth_service import register_user, authenticate_user, get_profile
from venue_booking.core.security import get_current_user

router = APIRouter(tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)):
    """Register a new account and receive a token."""
    user, token = await register_user(db, user_data)
    return AuthResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(login_data: UserLogin, db: AsyncSession = Depends(get_db)):
    """Authenticate and receive a JWT access token."""
    user, token = await authenticate_user(db, login_data)
    return AuthResponse(access_token=token, user=UserResponse.model_validate(user))


@router.get("/profile", response_model=UserResponse)
async def profile(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    """Profile of the authenticated caller."""
    return await get_profile(db, user.id)


@router.post("/logout")
async def logout():
    """Tokens are stateless; the client simply discards its token."""
    return {"message": "Logged out successfully"}
