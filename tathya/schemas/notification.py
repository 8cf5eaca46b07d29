"""Notification schemas."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from tathya.schemas.user import UserPublic


class NotificationTarget(BaseModel):
    """Where the event happened. A reply also names its top-level comment."""
    post_id: UUID | None = None
    comment_id: UUID | None = None
    parent_comment_id: UUID | None = None
    report_id: UUID | None = None


class NotificationResponse(BaseModel):
    id: UUID
    kind: str
    text: str
    actor: UserPublic | None = None
    target: NotificationTarget = Field(default_factory=NotificationTarget)
    is_read: bool = False
    created_at: datetime


class NotificationPage(BaseModel):
    items: list[NotificationResponse] = Field(default_factory=list)
    page: int
    total_pages: int
    total_count: int
    unread_count: int = 0
