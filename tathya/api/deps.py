"""API dependencies: auth, db session."""
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.core.errors import UnauthenticatedError, UnauthorizedError
from tathya.core.security import decode_token
from tathya.db.session import get_db
from tathya.models.user import User
from tathya.services.auth_service import get_user_by_id

security = HTTPBearer(auto_error=False)


async def get_current_user_optional(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    if not credentials:
        return None
    user_id = decode_token(credentials.credentials)
    if user_id is None:
        return None
    return await get_user_by_id(db, user_id)


async def get_current_user(
    user: User | None = Depends(get_current_user_optional),
) -> User:
    if user is None:
        raise UnauthenticatedError("Not authenticated")
    return user


async def get_current_moderator(
    user: User = Depends(get_current_user),
) -> User:
    if not user.is_moderator:
        raise UnauthorizedError("Access denied. Moderators only.")
    return user
