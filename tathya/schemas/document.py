"""Pydantic schemas for personal documents."""
from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field


class DocumentUpdate(BaseModel):
    name: str | None = Field(None, max_length=200)
    type: str | None = Field(None, max_length=20)


class DocumentVerify(BaseModel):
    status: Literal["Verified", "Rejected"]


class DocumentResponse(BaseModel):
    """Storage path is never exposed; files are fetched through the download route."""
    id: UUID
    name: str
    type: str
    filename: str
    mimetype: str
    size: int
    size_label: str
    status: str
    created_at: datetime
    updated_at: datetime | None = None
