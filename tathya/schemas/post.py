"""Pydantic schemas for Post."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from tathya.schemas.comment import CommentResponse
from tathya.schemas.user import UserPublic


class Attachment(BaseModel):
    filename: str
    path: str
    mimetype: str
    size: int


class PostCreate(BaseModel):
    title: str
    content: str
    community_id: UUID | None = None
    is_anonymous: bool = True


class PostUpdate(BaseModel):
    title: str | None = Field(None, max_length=300)
    content: str | None = None


class VisibilityUpdate(BaseModel):
    is_visible: bool


class PostResponse(BaseModel):
    id: UUID
    community_id: UUID | None = None
    user_id: UUID | None = None  # withheld for anonymous posts
    author: UserPublic | None = None
    title: str
    content: str
    attachments: list[Attachment] = []
    liked_by: list[UUID] = []
    likes_count: int = 0
    is_liked: bool = False
    comments: list[CommentResponse] = []
    comments_count: int = 0
    is_anonymous: bool = True
    is_visible: bool = True
    approved: bool = False
    is_own: bool = False
    created_at: datetime
    updated_at: datetime | None = None
