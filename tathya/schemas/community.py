"""Pydantic schemas for Community."""
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class CommunityCreate(BaseModel):
    name: str = ""
    region: str = ""
    description: str = ""
    tags: str | None = None  # comma separated


class ModeratorAdd(BaseModel):
    user_id: UUID


class CommunityResponse(BaseModel):
    id: UUID
    name: str
    region: str
    description: str
    tags: list[str] = []
    is_active: bool = True
    members_count: int = 0
    moderators_count: int = 0
    is_joined: bool = False
    is_moderator: bool = False
    created_at: datetime


class CommunityPage(BaseModel):
    items: list[CommunityResponse] = Field(default_factory=list)
    page: int
    total_pages: int
    total_count: int
