"""Site moderation: approval, visibility, removal and role management."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.core.errors import NotFoundError, ValidationError
from tathya.models.post import Post
from tathya.models.user import ROLE_MODERATOR, ROLE_USER, User
from tathya.services.post_service import delete_post, get_aggregate


def _log(msg: str, *args):
    print(f"[Moderator] {msg}", *args)


async def approve_post(db: AsyncSession, post_id: UUID, moderator: User) -> Post:
    post = await get_aggregate(db, post_id)
    post.approved = True
    await db.flush()
    _log("Post approved:", post.id, "by", moderator.id)
    return await get_aggregate(db, post_id)


async def set_visibility(db: AsyncSession, post_id: UUID, moderator: User, is_visible: bool) -> Post:
    post = await get_aggregate(db, post_id)
    post.is_visible = is_visible
    await db.flush()
    _log("Post visibility:", post.id, is_visible, "by", moderator.id)
    return await get_aggregate(db, post_id)


async def remove_post(db: AsyncSession, post_id: UUID, moderator: User) -> list[dict]:
    attachments = await delete_post(db, post_id, moderator)
    _log("Post deleted:", post_id, "by", moderator.id)
    return attachments


async def list_users(db: AsyncSession, moderator: User) -> list[User]:
    """All users except the requesting moderator."""
    result = await db.execute(select(User).where(User.id != moderator.id).order_by(User.created_at))
    return list(result.scalars().all())


async def set_role(db: AsyncSession, email: str, role: str) -> User:
    if role not in (ROLE_USER, ROLE_MODERATOR):
        raise ValidationError(f"Unknown role: {role}")
    result = await db.execute(select(User).where(User.email == email.lower()))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError(f"User '{email}' not found")
    user.role = role
    await db.flush()
    return user
