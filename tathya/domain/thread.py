"""Comment thread and like-set rules.

These functions are shared by the API services (validation and ordering of the
authoritative data) and by the client cache (optimistic prediction before the
server answers). They operate on anything shaped like the response schemas:
nodes carry ``liked_by``, ``likes_count`` and ``is_liked``; top-level comments
also carry ``pinned`` and ``replies``.

A post holds comments, a comment holds replies, and a reply holds nothing.
"""
from dataclasses import dataclass
from typing import Any, Sequence, TypeVar
from uuid import UUID

from tathya.core.errors import NotFoundError, UnauthenticatedError, UnauthorizedError, ValidationError

T = TypeVar("T")


@dataclass(frozen=True)
class LikeTarget:
    """The post itself, a comment of it, or a reply under one of its comments."""

    post_id: UUID
    comment_id: UUID | None = None
    reply_id: UUID | None = None

    def __post_init__(self) -> None:
        if self.reply_id is not None and self.comment_id is None:
            raise ValueError("A reply target needs the id of its parent comment")

    @property
    def kind(self) -> str:
        if self.reply_id is not None:
            return "reply"
        if self.comment_id is not None:
            return "comment"
        return "post"


def require_user(user_id: UUID | None) -> UUID:
    if user_id is None:
        raise UnauthenticatedError("Please login to continue")
    return user_id


def normalize_content(content: str | None, label: str = "Comment content") -> str:
    """Trim ``content``; empty or whitespace-only text is rejected."""
    text = (content or "").strip()
    if not text:
        raise ValidationError(f"{label} is required")
    return text


def toggle_membership(liked_by: Sequence[UUID], user_id: UUID) -> tuple[list[UUID], bool]:
    """Remove ``user_id`` if present, else append it. Returns (members, now_liked)."""
    if user_id in liked_by:
        return [member for member in liked_by if member != user_id], False
    return [*liked_by, user_id], True


def display_order(comments: Sequence[T]) -> list[T]:
    """Pinned first, newest first within each group. Storage order is untouched."""
    newest_first = sorted(comments, key=lambda c: c.created_at, reverse=True)
    return sorted(newest_first, key=lambda c: not c.pinned)


def ensure_can_pin(author_id: UUID, user_id: UUID | None) -> None:
    if require_user(user_id) != author_id:
        raise UnauthorizedError("Only the comment author can pin it")


def find_comment(post: Any, comment_id: UUID) -> Any:
    """Top-level comment of ``post``; replies are never matched here."""
    for comment in post.comments:
        if comment.id == comment_id:
            return comment
    raise NotFoundError("Comment not found")


def find_reply(post: Any, comment_id: UUID, reply_id: UUID) -> Any:
    comment = find_comment(post, comment_id)
    for reply in comment.replies:
        if reply.id == reply_id:
            return reply
    raise NotFoundError("Reply not found")


def resolve_target(post: Any, target: LikeTarget) -> Any:
    if post.id != target.post_id:
        raise NotFoundError("Post not found")
    if target.reply_id is not None:
        return find_reply(post, target.comment_id, target.reply_id)
    if target.comment_id is not None:
        return find_comment(post, target.comment_id)
    return post


def apply_like(post: Any, target: LikeTarget, user_id: UUID | None) -> int:
    """Toggle ``user_id`` on the target node in place. Returns the new like count."""
    user_id = require_user(user_id)
    node = resolve_target(post, target)
    node.liked_by, node.is_liked = toggle_membership(node.liked_by, user_id)
    node.likes_count = len(node.liked_by)
    return node.likes_count


def apply_comment(post: Any, node: Any, parent_id: UUID | None = None) -> Any:
    """Append ``node`` as a comment of ``post`` or as a reply of ``parent_id``."""
    normalize_content(node.content)
    if parent_id is None:
        post.comments.append(node)
        post.comments_count = len(post.comments)
    else:
        try:
            parent = find_comment(post, parent_id)
        except NotFoundError:
            raise NotFoundError("Comment to reply to not found") from None
        parent.replies.append(node)
    return node


def apply_pin(post: Any, comment_id: UUID, user_id: UUID | None) -> bool:
    comment = find_comment(post, comment_id)
    ensure_can_pin(comment.user_id, user_id)
    comment.pinned = not comment.pinned
    return comment.pinned


def replace_node(post: Any, old_id: UUID, node: Any) -> None:
    """Swap a locally created node (by temporary id) for the server's copy."""
    for index, comment in enumerate(post.comments):
        if comment.id == old_id:
            post.comments[index] = node
            return
        for reply_index, reply in enumerate(comment.replies):
            if reply.id == old_id:
                comment.replies[reply_index] = node
                return
    raise NotFoundError("Comment not found")
