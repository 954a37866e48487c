"""Auth API endpoints - registration, login, profile.

Endpoints:
    POST /api/v1/auth/register - Create an account, return a session token
    POST /api/v1/auth/login    - Check credentials, return a session token
    GET  /api/v1/auth/profile  - Return the current user's profile
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from drive.auth.accounts import get_profile, login_user, register_user
from drive.auth.dependencies import get_current_user_id
from drive.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from drive.config import get_settings
from drive.database import get_db_session

router = APIRouter(prefix="/auth", tags=["auth"])


def _token_response(user, token: str) -> TokenResponse:
    return TokenResponse(
        token=token,
        expires_in=get_settings().JWT_ACCESS_EXPIRE_MINUTES * 60,
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    session: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    """Create an account and sign it in."""
    user, token = await register_user(session, request.name, request.email, request.password)
    return _token_response(user, token)


@router.post("/login", response_model=TokenResponse)
async def login(
    request: LoginRequest,
    session: AsyncSession = Depends(get_db_session),
) -> TokenResponse:
    user, token = await login_user(session, request.email, request.password)
    return _token_response(user, token)


@router.get("/profile", response_model=UserResponse)
async def profile(
    user_id: str = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await get_profile(session, user_id)
    return UserResponse.model_validate(user)
