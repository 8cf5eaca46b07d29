"""Resume builder storage for the signed-in user."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.api.deps import get_db, get_current_user
from tathya.core.errors import NotFoundError
from tathya.models.user import User
from tathya.schemas.resume import ResumeData, ResumePatch, ResumeResponse
from tathya.services import resume_service

router = APIRouter(prefix="/resume", tags=["resume"])


@router.get("", response_model=ResumeResponse)
async def get_resume(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    resume = await resume_service.get_or_create(db, current_user)
    await db.commit()
    return resume_service.resume_to_response(resume)


@router.put("", response_model=ResumeResponse)
async def save_resume(
    data: ResumeData,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    resume = await resume_service.save(db, current_user, data)
    await db.commit()
    return resume_service.resume_to_response(resume)


@router.patch("", response_model=ResumeResponse)
async def patch_resume(
    changes: ResumePatch,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    resume = await resume_service.patch(db, current_user, changes)
    await db.commit()
    return resume_service.resume_to_response(resume)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resume(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not await resume_service.remove(db, current_user):
        raise NotFoundError("Resume not found")
    await db.commit()
    return None
