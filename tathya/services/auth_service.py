"""Authentication business logic."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.core.security import verify_password, get_password_hash, create_access_token, create_refresh_token
from tathya.models.user import User
from tathya.schemas.user import UserCreate, UserPublic, UserResponse


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: UUID) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    user = User(
        full_name=data.full_name.strip(),
        email=data.email.lower(),
        password_hash=get_password_hash(data.password),
        avatar_url=data.avatar_url,
        phone=data.phone,
        university=data.university,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User | None:
    user = await get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


def user_to_response(user: User, include_email: bool = False) -> UserResponse:
    return UserResponse(
        id=user.id,
        full_name=user.full_name,
        email=user.email if include_email else None,
        avatar_url=user.avatar_url,
        phone=user.phone if include_email else None,
        university=user.university,
        role=user.role,
        is_verified=user.is_verified,
        created_at=user.created_at,
    )


def user_to_public(user: User) -> UserPublic:
    return UserPublic(id=user.id, full_name=user.full_name, avatar_url=user.avatar_url, role=user.role)


def create_tokens_for_user(user: User) -> tuple[str, str]:
    return create_access_token(user.id), create_refresh_token(user.id)
