"""Issue reports filed by the signed-in user."""
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.api.deps import get_db, get_current_user
from tathya.core.config import settings
from tathya.models.user import User
from tathya.schemas.report import (
    ReportCategory,
    ReportCreate,
    ReportPage,
    ReportPriority,
    ReportResponse,
    ReportUpdate,
)
from tathya.services import report_service
from tathya.services.attachment_service import discard_attachments, read_attachments, store_attachments
from tathya.services.storage_service import get_storage

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    title: str = Form(""),
    description: str = Form(""),
    category: ReportCategory = Form("Other"),
    priority: ReportPriority = Form("Medium"),
    is_anonymous: bool = Form(True),
    attachments: list[UploadFile] | None = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    data = ReportCreate(
        title=title, description=description, category=category, priority=priority, is_anonymous=is_anonymous
    )
    loaded = await read_attachments(attachments or [], settings.MAX_REPORT_ATTACHMENTS, owner="report")
    storage = get_storage()
    stored = store_attachments(storage, str(current_user.id), loaded, kind="reports")
    try:
        report = await report_service.create_report(db, current_user, data, stored)
        await db.commit()
    except Exception:
        discard_attachments(storage, stored)
        raise
    return report_service.report_to_response(report, current_user)


@router.get("/my-reports", response_model=ReportPage)
async def my_reports(
    page: int = Query(1, ge=1, alias="pageNumber"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await report_service.list_own(db, current_user, page, settings.REPORT_PAGE_SIZE)


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    report = await report_service.get_report_for_viewer(db, report_id, current_user)
    return report_service.report_to_response(report, current_user)


@router.put("/{report_id}", response_model=ReportResponse)
async def update_report(
    report_id: UUID,
    data: ReportUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    report = await report_service.update_report(db, report_id, current_user, data)
    await db.commit()
    return report_service.report_to_response(report, current_user)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(
    report_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    attachments = await report_service.delete_report(db, report_id, current_user)
    await db.commit()
    discard_attachments(get_storage(), attachments)
    return None
