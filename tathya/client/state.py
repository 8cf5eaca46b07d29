"""Local feed cache with optimistic updates.

Mutations are first applied locally with the same thread rules the server
uses, then sent to the server. A successful answer overwrites the touched
node; a failure reloads the whole page, dropping every optimistic change,
and re-raises.
"""
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

import httpx

from tathya.client.api import TathyaClient
from tathya.client.session import SessionStore
from tathya.core.errors import NotFoundError, TathyaError
from tathya.domain.thread import (
    LikeTarget,
    apply_comment,
    apply_like,
    apply_pin,
    display_order,
    find_comment,
    replace_node,
    require_user,
    resolve_target,
)
from tathya.schemas.comment import CommentAdded, CommentResponse, LikeResponse, ReplyResponse
from tathya.schemas.feed import FeedPage
from tathya.schemas.post import PostResponse
from tathya.schemas.user import Token

CLIENT_ERRORS = (TathyaError, httpx.HTTPError)


class FeedStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    RECONCILING = "reconciling"
    FAILED = "failed"


class FeedState:
    def __init__(self, client: TathyaClient, session: SessionStore | None = None, page_size: int | None = None):
        self.client = client
        self.page_size = page_size
        self.page_number = 1
        self.page: FeedPage | None = None
        self.status = FeedStatus.IDLE
        self.error: Exception | None = None
        self.user_id: UUID | None = None
        self._unsubscribe = None
        if session is not None:
            token = session.load()
            self.user_id = token.user.id if token else None
            self._unsubscribe = session.subscribe(self._on_session_change)

    @property
    def posts(self) -> list[PostResponse]:
        return self.page.items if self.page else []

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_session_change(self, token: Token | None) -> None:
        user_id = token.user.id if token else None
        if user_id != self.user_id:
            self.user_id = user_id
            self.page = None
            self.status = FeedStatus.IDLE

    async def load(self, page_number: int = 1) -> FeedPage:
        self.status = FeedStatus.LOADING
        try:
            self.page = await self.client.list_posts(page_number, self.page_size)
        except CLIENT_ERRORS as exc:
            self.status = FeedStatus.FAILED
            self.error = exc
            raise
        self.page_number = page_number
        self.status = FeedStatus.READY
        self.error = None
        return self.page

    def post(self, post_id: UUID) -> PostResponse:
        for post in self.posts:
            if post.id == post_id:
                return post
        raise NotFoundError("Post not found")

    def comments_for_display(self, post_id: UUID) -> list[CommentResponse]:
        return display_order(self.post(post_id).comments)

    async def _reload_after_failure(self, error: Exception) -> None:
        """Drop optimistic changes. A failed reload leaves the page FAILED with ``error``."""
        try:
            await self.load(self.page_number)
        except CLIENT_ERRORS:
            self.error = error

    async def toggle_like(self, target: LikeTarget) -> LikeResponse:
        apply_like(self.post(target.post_id), target, self.user_id)
        self.status = FeedStatus.RECONCILING
        try:
            result = await self.client.toggle_like(target)
        except CLIENT_ERRORS as exc:
            await self._reload_after_failure(exc)
            raise
        node = resolve_target(self.post(target.post_id), target)
        node.liked_by = list(result.liked_by)
        node.likes_count = result.likes
        node.is_liked = result.liked
        self.status = FeedStatus.READY
        return result

    async def add_comment(self, post_id: UUID, content: str, parent_id: UUID | None = None) -> CommentAdded:
        user_id = require_user(self.user_id)
        post = self.post(post_id)
        text = (content or "").strip()
        fields = {"id": uuid4(), "user_id": user_id, "content": text, "created_at": datetime.utcnow()}
        node = ReplyResponse(**fields) if parent_id is not None else CommentResponse(**fields)
        apply_comment(post, node, parent_id)
        self.status = FeedStatus.RECONCILING
        try:
            added = await self.client.add_comment(post_id, text, parent_id)
        except CLIENT_ERRORS as exc:
            await self._reload_after_failure(exc)
            raise
        replace_node(self.post(post_id), node.id, added.comment)
        self.status = FeedStatus.READY
        return added

    async def toggle_pin(self, post_id: UUID, comment_id: UUID) -> bool:
        apply_pin(self.post(post_id), comment_id, self.user_id)
        self.status = FeedStatus.RECONCILING
        try:
            result = await self.client.toggle_pin(post_id, comment_id)
        except CLIENT_ERRORS as exc:
            await self._reload_after_failure(exc)
            raise
        find_comment(self.post(post_id), comment_id).pinned = result.pinned
        self.status = FeedStatus.READY
        return result.pinned
