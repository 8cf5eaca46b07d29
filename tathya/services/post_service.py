"""Post aggregate business logic.

A post owns its comments, their replies and every like-set in that tree.
Comments and replies are only ever appended; they go away with the post.
"""
from collections import defaultdict
from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tathya.core.errors import NotFoundError, UnauthorizedError
from tathya.domain.thread import display_order, ensure_can_pin, normalize_content, require_user
from tathya.models.comment import Comment
from tathya.models.notification import KIND_COMMENT, KIND_REPLY
from tathya.models.post import Post
from tathya.models.user import User
from tathya.schemas.comment import CommentResponse, ReplyResponse
from tathya.schemas.post import Attachment, PostCreate, PostResponse, PostUpdate
from tathya.services import community_service
from tathya.services.auth_service import user_to_public
from tathya.services.notification_service import notify


def aggregate_query():
    """SELECT for posts with their full comment tree, authors and like-sets."""
    return select(Post).options(
        selectinload(Post.user),
        selectinload(Post.likes),
        selectinload(Post.comments).selectinload(Comment.user),
        selectinload(Post.comments).selectinload(Comment.likes),
    ).execution_options(populate_existing=True)


def can_view(post: Post, viewer: User | None) -> bool:
    if post.is_visible and post.approved:
        return True
    if viewer is None:
        return False
    return viewer.is_moderator or post.user_id == viewer.id


async def get_aggregate(db: AsyncSession, post_id: UUID) -> Post:
    result = await db.execute(aggregate_query().where(Post.id == post_id))
    post = result.scalar_one_or_none()
    if post is None:
        raise NotFoundError("Post not found")
    return post


async def get_post_for_viewer(db: AsyncSession, post_id: UUID, viewer: User | None) -> Post:
    """Load the aggregate; hidden and unapproved posts look missing to outsiders."""
    post = await get_aggregate(db, post_id)
    if not can_view(post, viewer):
        raise NotFoundError("Post not found")
    return post


async def touch_post(db: AsyncSession, post_id: UUID) -> None:
    await db.execute(update(Post).where(Post.id == post_id).values(updated_at=datetime.utcnow()))


async def _ensure_member(db: AsyncSession, community_id: UUID, user: User, action: str) -> None:
    if not await community_service.is_member(db, community_id, user.id):
        raise UnauthorizedError(f"You must be a member of the community to {action}")


async def create_post(db: AsyncSession, user: User, data: PostCreate, attachments: list[dict]) -> Post:
    title = normalize_content(data.title, "Post title")
    content = normalize_content(data.content, "Post content")
    if data.community_id is not None:
        community = await community_service.get_community(db, data.community_id)
        await _ensure_member(db, community.id, user, "post")
    post = Post(
        user_id=user.id,
        community_id=data.community_id,
        title=title,
        content=content,
        attachments=attachments,
        is_anonymous=data.is_anonymous,
    )
    db.add(post)
    await db.flush()
    return await get_aggregate(db, post.id)


async def update_post(db: AsyncSession, post_id: UUID, user: User, data: PostUpdate) -> Post:
    post = await get_aggregate(db, post_id)
    if post.user_id != user.id:
        raise UnauthorizedError("Not authorized to update this post")
    if data.title is not None and data.title.strip():
        post.title = data.title.strip()
    if data.content is not None and data.content.strip():
        post.content = data.content.strip()
    post.updated_at = datetime.utcnow()
    await db.flush()
    return await get_aggregate(db, post_id)


async def delete_post(db: AsyncSession, post_id: UUID, user: User) -> list[dict]:
    """Owner, site moderator or moderator of the post's community.

    Returns the removed post's attachments so the caller can discard the files
    once the transaction is committed.
    """
    post = await get_post_for_viewer(db, post_id, user)
    attachments = list(post.attachments or [])
    allowed = post.user_id == user.id or user.is_moderator
    if not allowed and post.community_id is not None:
        allowed = await community_service.is_moderator(db, post.community_id, user.id)
    if not allowed:
        raise UnauthorizedError("Not authorized to delete this post")
    # Replies first so their parents are never removed ahead of them
    for reply in [c for c in post.comments if c.parent_id is not None]:
        post.comments.remove(reply)
    await db.flush()
    await db.delete(post)
    await db.flush()
    return attachments


async def _load_top_level_comment(db: AsyncSession, post_id: UUID, comment_id: UUID) -> Comment | None:
    result = await db.execute(
        select(Comment).where(
            Comment.id == comment_id,
            Comment.post_id == post_id,
            Comment.parent_id.is_(None),
        )
    )
    return result.scalar_one_or_none()


async def add_comment(
    db: AsyncSession,
    post_id: UUID,
    user: User | None,
    content: str | None,
    parent_id: UUID | None = None,
) -> Comment:
    """Append a top-level comment, or a reply under top-level comment ``parent_id``."""
    require_user(user.id if user else None)
    text = normalize_content(content)
    post = await get_post_for_viewer(db, post_id, user)
    if post.community_id is not None:
        await _ensure_member(db, post.community_id, user, "comment")

    notify_user_id = post.user_id
    if parent_id is not None:
        # Only top-level comments resolve as parents, so replies never nest
        parent = await _load_top_level_comment(db, post_id, parent_id)
        if parent is None:
            raise NotFoundError("Comment to reply to not found")
        notify_user_id = parent.user_id

    comment = Comment(post_id=post_id, parent_id=parent_id, user_id=user.id, content=text)
    db.add(comment)
    await db.flush()
    await touch_post(db, post_id)

    preview = text[:50] + "..." if len(text) > 50 else text
    if parent_id is not None:
        kind, message = KIND_REPLY, f'{user.full_name} replied to your comment: "{preview}"'
    else:
        kind, message = KIND_COMMENT, f'{user.full_name} commented: "{preview}"'
    await notify(
        db,
        notify_user_id,
        user,
        kind,
        message,
        post_id=post_id,
        comment_id=comment.id,
        parent_comment_id=parent_id,
    )
    await db.refresh(comment, attribute_names=["user", "likes"])
    return comment


async def toggle_pin(db: AsyncSession, post_id: UUID, comment_id: UUID, user: User | None) -> bool:
    await get_post_for_viewer(db, post_id, user)
    comment = await _load_top_level_comment(db, post_id, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    ensure_can_pin(comment.user_id, user.id if user else None)
    comment.pinned = not comment.pinned
    await db.flush()
    await touch_post(db, post_id)
    return comment.pinned


def _liked_by(likes) -> list[UUID]:
    return [like.user_id for like in likes]


def reply_to_response(reply: Comment, viewer: User | None) -> ReplyResponse:
    liked_by = _liked_by(reply.likes)
    return ReplyResponse(
        id=reply.id,
        user_id=reply.user_id,
        author=user_to_public(reply.user) if reply.user else None,
        content=reply.content,
        created_at=reply.created_at,
        liked_by=liked_by,
        likes_count=len(liked_by),
        is_liked=viewer is not None and viewer.id in liked_by,
    )


def comment_to_response(comment: Comment, replies: list[Comment], viewer: User | None) -> CommentResponse:
    base = reply_to_response(comment, viewer)
    return CommentResponse(
        **base.model_dump(exclude={"kind"}),
        pinned=comment.pinned,
        replies=[reply_to_response(r, viewer) for r in replies],
    )


def build_thread(comments: list[Comment], viewer: User | None) -> list[CommentResponse]:
    """Group the flat comment list into comments with replies, in display order."""
    replies_by_parent: dict[UUID, list[Comment]] = defaultdict(list)
    for c in comments:
        if c.parent_id is not None:
            replies_by_parent[c.parent_id].append(c)
    nodes = [
        comment_to_response(c, replies_by_parent.get(c.id, []), viewer)
        for c in comments
        if c.parent_id is None
    ]
    return display_order(nodes)


def post_to_response(post: Post, viewer: User | None) -> PostResponse:
    is_own = viewer is not None and viewer.id == post.user_id
    reveal_author = not post.is_anonymous or is_own or (viewer is not None and viewer.is_moderator)
    liked_by = _liked_by(post.likes)
    thread = build_thread(list(post.comments), viewer)
    return PostResponse(
        id=post.id,
        community_id=post.community_id,
        user_id=post.user_id if reveal_author else None,
        author=user_to_public(post.user) if reveal_author and post.user else None,
        title=post.title,
        content=post.content,
        attachments=[Attachment(**a) for a in (post.attachments or [])],
        liked_by=liked_by,
        likes_count=len(liked_by),
        is_liked=viewer is not None and viewer.id in liked_by,
        comments=thread,
        comments_count=len(thread),
        is_anonymous=post.is_anonymous,
        is_visible=post.is_visible,
        approved=post.approved,
        is_own=is_own,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )
