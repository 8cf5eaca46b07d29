"""Pydantic schemas for comments and replies."""
from datetime import datetime
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from tathya.schemas.user import UserPublic


class CommentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str | None = None
    reply_to: UUID | None = Field(None, alias="replyTo")


class ReplyResponse(BaseModel):
    kind: Literal["reply"] = "reply"
    id: UUID
    user_id: UUID
    author: UserPublic | None = None
    content: str | None = None
    created_at: datetime
    liked_by: list[UUID] = []
    likes_count: int = 0
    is_liked: bool = False


class CommentResponse(ReplyResponse):
    kind: Literal["comment"] = "comment"
    pinned: bool = False
    replies: list[ReplyResponse] = []


# Tagged so a reply never parses as a comment with its own replies slot
ThreadNode = Annotated[CommentResponse | ReplyResponse, Field(discriminator="kind")]


class CommentAdded(BaseModel):
    message: str = "Comment added"
    id: UUID
    parent_id: UUID | None = None
    comment: ThreadNode


class LikeResponse(BaseModel):
    likes: int
    liked: bool
    liked_by: list[UUID] = []


class PinResponse(BaseModel):
    pinned: bool
