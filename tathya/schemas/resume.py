"""Resume document schema.

The stored document is versioned: ``SCHEMA_VERSION`` is written next to the
data, and every field has a named default so an older or partial document
still loads into a complete ``ResumeData``.
"""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

SCHEMA_VERSION = 1

DEFAULT_TEMPLATE = "modern"
DEFAULT_SUMMARY = "Motivated professional seeking opportunities..."


class Experience(BaseModel):
    company: str = Field(..., min_length=1)
    position: str = Field(..., min_length=1)
    duration: str = Field(..., min_length=1)
    description: str = ""


class Education(BaseModel):
    institution: str = Field(..., min_length=1)
    degree: str = Field(..., min_length=1)
    year: str = Field(..., min_length=1)
    gpa: str = ""


class ResumeData(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    summary: str = DEFAULT_SUMMARY
    experience: list[Experience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    template: str = Field(DEFAULT_TEMPLATE, pattern="^(modern|classic|minimal)$")


class ResumePatch(BaseModel):
    """Top-level fields to replace; omitted fields keep their stored value."""
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    summary: str | None = None
    experience: list[Experience] | None = None
    education: list[Education] | None = None
    skills: list[str] | None = None
    template: str | None = Field(None, pattern="^(modern|classic|minimal)$")


class ResumeResponse(ResumeData):
    schema_version: int = SCHEMA_VERSION
    created_at: datetime | None = None
    updated_at: datetime | None = None


def build_default_resume(user: Any) -> ResumeData:
    """Build the first resume for a user from their profile."""
    return ResumeData(
        name=getattr(user, "full_name", None) or "",
        email=getattr(user, "email", None) or "",
        phone=getattr(user, "phone", None) or "",
    )


def upgrade_document(data: dict | None, version: int | None) -> ResumeData:
    """Load a stored document of any known version into the current schema."""
    data = dict(data or {})
    if (version or 0) < 1:
        # Pre-versioned documents kept skills as one comma separated string
        skills = data.get("skills")
        if isinstance(skills, str):
            data["skills"] = [s.strip() for s in skills.split(",") if s.strip()]
    return ResumeData.model_validate(data)
