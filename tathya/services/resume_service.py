"""Resume storage: one versioned document per user."""
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.models.resume import Resume
from tathya.models.user import User
from tathya.schemas.resume import (
    SCHEMA_VERSION,
    ResumeData,
    ResumePatch,
    ResumeResponse,
    build_default_resume,
    upgrade_document,
)


async def _get(db: AsyncSession, user: User) -> Resume | None:
    result = await db.execute(select(Resume).where(Resume.user_id == user.id))
    return result.scalar_one_or_none()


def _store(resume: Resume, data: ResumeData) -> None:
    resume.data = data.model_dump(mode="json")
    resume.template = data.template
    resume.schema_version = SCHEMA_VERSION
    resume.updated_at = datetime.utcnow()


async def get_or_create(db: AsyncSession, user: User) -> Resume:
    resume = await _get(db, user)
    if resume is None:
        resume = Resume(user_id=user.id)
        _store(resume, build_default_resume(user))
        db.add(resume)
        await db.flush()
    return resume


async def save(db: AsyncSession, user: User, data: ResumeData) -> Resume:
    resume = await _get(db, user)
    if resume is None:
        resume = Resume(user_id=user.id)
        db.add(resume)
    _store(resume, data)
    await db.flush()
    return resume


async def patch(db: AsyncSession, user: User, changes: ResumePatch) -> Resume:
    resume = await get_or_create(db, user)
    merged = upgrade_document(resume.data, resume.schema_version).model_dump()
    merged.update(changes.model_dump(exclude_none=True))
    _store(resume, ResumeData.model_validate(merged))
    await db.flush()
    return resume


async def remove(db: AsyncSession, user: User) -> bool:
    result = await db.execute(delete(Resume).where(Resume.user_id == user.id))
    return (result.rowcount or 0) > 0


def resume_to_response(resume: Resume) -> ResumeResponse:
    data = upgrade_document(resume.data, resume.schema_version)
    return ResumeResponse(
        **data.model_dump(),
        schema_version=SCHEMA_VERSION,
        created_at=resume.created_at,
        updated_at=resume.updated_at,
    )
