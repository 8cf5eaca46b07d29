"""Pydantic schemas for direct messages."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from tathya.schemas.user import UserPublic


class MessageCreate(BaseModel):
    to: UUID | None = None
    content: str | None = None


class MessageResponse(BaseModel):
    id: UUID
    sender: UserPublic
    recipient: UserPublic
    content: str
    is_read: bool = False
    created_at: datetime
