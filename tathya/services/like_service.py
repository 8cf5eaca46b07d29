"""Like-set toggling for posts, comments and replies.

Membership is one row per (target, user). A toggle deletes the caller's row
and, if there was none, inserts it with ON CONFLICT DO NOTHING. Concurrent
toggles by different users touch different rows, so none are lost.
"""
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.core.errors import NotFoundError
from tathya.db.session import insert_ignore
from tathya.domain.thread import LikeTarget, require_user
from tathya.models.comment import Comment
from tathya.models.engagement import CommentLike, PostLike
from tathya.models.notification import KIND_LIKE
from tathya.models.post import Post
from tathya.models.user import User
from tathya.services.notification_service import notify
from tathya.services.post_service import can_view, touch_post


@dataclass
class LikeResult:
    likes: int
    liked: bool
    liked_by: list[UUID] = field(default_factory=list)


async def _resolve(db: AsyncSession, target: LikeTarget, viewer: User) -> tuple[Post, Comment | None]:
    result = await db.execute(select(Post).where(Post.id == target.post_id))
    post = result.scalar_one_or_none()
    if post is None or not can_view(post, viewer):
        raise NotFoundError("Post not found")
    if target.comment_id is None:
        return post, None

    result = await db.execute(
        select(Comment).where(
            Comment.id == target.comment_id,
            Comment.post_id == post.id,
            Comment.parent_id.is_(None),
        )
    )
    comment = result.scalar_one_or_none()
    if comment is None:
        raise NotFoundError("Comment not found")
    if target.reply_id is None:
        return post, comment

    result = await db.execute(
        select(Comment).where(
            Comment.id == target.reply_id,
            Comment.post_id == post.id,
            Comment.parent_id == comment.id,
        )
    )
    reply = result.scalar_one_or_none()
    if reply is None:
        raise NotFoundError("Reply not found")
    return post, reply


async def _toggle_row(db: AsyncSession, model, key_column: str, key: UUID, user_id: UUID) -> bool:
    """Flip one membership row. Returns True when the user is now a member."""
    key_attr = getattr(model, key_column)
    removed = await db.execute(delete(model).where(key_attr == key, model.user_id == user_id))
    if removed.rowcount:
        return False
    stmt = insert_ignore(db, model).values(**{key_column: key, "user_id": user_id})
    await db.execute(stmt.on_conflict_do_nothing(index_elements=[key_column, "user_id"]))
    return True


async def _members(db: AsyncSession, model, key_column: str, key: UUID) -> list[UUID]:
    key_attr = getattr(model, key_column)
    result = await db.execute(
        select(model.user_id).where(key_attr == key).order_by(model.created_at)
    )
    return [row[0] for row in result.all()]


async def toggle_like(db: AsyncSession, target: LikeTarget, user: User | None) -> LikeResult:
    user_id = require_user(user.id if user else None)
    post, node = await _resolve(db, target, user)

    if node is None:
        model, key_column, key, owner_id = PostLike, "post_id", post.id, post.user_id
    else:
        model, key_column, key, owner_id = CommentLike, "comment_id", node.id, node.user_id

    liked = await _toggle_row(db, model, key_column, key, user_id)
    await touch_post(db, post.id)
    liked_by = await _members(db, model, key_column, key)

    if liked:
        await notify(
            db,
            owner_id,
            user,
            KIND_LIKE,
            f"{user.full_name} liked your {target.kind}",
            post_id=post.id,
            comment_id=node.id if node is not None else None,
            parent_comment_id=node.parent_id if node is not None else None,
        )
    return LikeResult(likes=len(liked_by), liked=liked, liked_by=liked_by)
