"""Auth endpoints: register, login, refresh."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.api.deps import get_db, get_current_user
from tathya.core.errors import UnauthenticatedError, ValidationError
from tathya.core.security import decode_token
from tathya.models.user import User
from tathya.schemas.user import UserCreate, UserResponse, Token, LoginRequest, TokenRefresh
from tathya.services.auth_service import (
    create_user,
    get_user_by_email,
    get_user_by_id,
    authenticate_user,
    user_to_response,
    create_tokens_for_user,
)


def _log(msg: str, *args):
    print(f"[Auth] {msg}", *args)


router = APIRouter(prefix="/auth", tags=["auth"])


def _token_for(user: User) -> Token:
    access_token, refresh_token = create_tokens_for_user(user)
    return Token(
        access_token=access_token,
        refresh_token=refresh_token,
        user=user_to_response(user, include_email=True),
    )


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    _log("Register attempt:", data.email)
    if await get_user_by_email(db, data.email):
        raise ValidationError("Email already registered")
    user = await create_user(db, data)
    await db.commit()
    _log("Register success:", user.id)
    return _token_for(user)


@router.post("/login", response_model=Token)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    _log("Login attempt:", data.email)
    user = await authenticate_user(db, data.email, data.password)
    if not user:
        _log("Login failed: invalid email or password")
        raise UnauthenticatedError("Invalid email or password")
    _log("Login success:", user.id)
    return _token_for(user)


@router.post("/refresh", response_model=Token)
async def refresh_token(
    body: TokenRefresh,
    db: AsyncSession = Depends(get_db),
):
    user_id = decode_token(body.refresh_token, expected_type="refresh")
    if user_id is None:
        raise UnauthenticatedError("Invalid refresh token")
    user = await get_user_by_id(db, user_id)
    if not user:
        raise UnauthenticatedError("User not found")
    return _token_for(user)


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return user_to_response(current_user, include_email=True)
