"""Pydantic schemas for issue reports."""
from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from tathya.schemas.post import Attachment
from tathya.schemas.user import UserPublic

ReportCategory = Literal["Academic Pressure", "Harassment", "Discrimination", "Unfair Treatment", "Other"]
ReportStatus = Literal["Pending", "In Review", "Resolved", "Closed"]
ReportPriority = Literal["Low", "Medium", "High"]


class ReportCreate(BaseModel):
    title: str
    description: str
    category: ReportCategory = "Other"
    priority: ReportPriority = "Medium"
    is_anonymous: bool = True


class ReportUpdate(BaseModel):
    """Reporter edits while the report is still pending."""
    title: str | None = Field(None, max_length=300)
    description: str | None = None
    category: ReportCategory | None = None


class ReportReview(BaseModel):
    """Moderator triage."""
    status: ReportStatus | None = None
    priority: ReportPriority | None = None
    resolution_notes: str | None = None


class ReportResponse(BaseModel):
    id: UUID
    user_id: UUID | None = None  # withheld from moderators for anonymous reports
    reporter: UserPublic | None = None
    title: str
    description: str
    category: str
    status: str
    priority: str
    is_anonymous: bool = True
    attachments: list[Attachment] = []
    resolution_notes: str | None = None
    is_own: bool = False
    created_at: datetime
    updated_at: datetime | None = None
    resolved_at: datetime | None = None


class ReportPage(BaseModel):
    items: list[ReportResponse] = Field(default_factory=list)
    page: int
    total_pages: int
    total_count: int
