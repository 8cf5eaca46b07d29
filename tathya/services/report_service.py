"""Issue reports: private submissions from students, triaged by moderators.

A report is visible to its reporter and to site moderators only; to anyone
else it does not exist. Anonymous reports hide the reporter from moderators.
The reporter may edit or withdraw a report while it is still pending.
"""
import math
from datetime import datetime
from uuid import UUID

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tathya.core.errors import NotFoundError, UnauthorizedError, ValidationError
from tathya.domain.thread import normalize_content
from tathya.models.notification import KIND_REPORT
from tathya.models.report import STATUS_PENDING, STATUS_RESOLVED, Report
from tathya.models.user import User
from tathya.schemas.post import Attachment
from tathya.schemas.report import ReportCreate, ReportPage, ReportResponse, ReportReview, ReportUpdate
from tathya.services.auth_service import user_to_public
from tathya.services.notification_service import notify


def _log(msg: str, *args):
    print(f"[Reports] {msg}", *args)


async def get_report_for_viewer(db: AsyncSession, report_id: UUID, viewer: User) -> Report:
    result = await db.execute(select(Report).options(selectinload(Report.user)).where(Report.id == report_id))
    report = result.scalar_one_or_none()
    if report is None or not (viewer.is_moderator or report.user_id == viewer.id):
        raise NotFoundError("Report not found")
    return report


async def create_report(db: AsyncSession, user: User, data: ReportCreate, attachments: list[dict]) -> Report:
    report = Report(
        user_id=user.id,
        title=normalize_content(data.title, "Report title"),
        description=normalize_content(data.description, "Report description"),
        category=data.category,
        priority=data.priority,
        is_anonymous=data.is_anonymous,
        attachments=attachments,
    )
    db.add(report)
    await db.flush()
    _log("Report submitted:", report.id, report.category)
    return await get_report_for_viewer(db, report.id, user)


async def _page(db: AsyncSession, conditions: list, viewer: User, page: int, page_size: int) -> ReportPage:
    count = await db.scalar(select(func.count()).select_from(Report).where(*conditions)) or 0
    result = await db.execute(
        select(Report)
        .options(selectinload(Report.user))
        .where(*conditions)
        .order_by(desc(Report.created_at))
        .offset(page_size * (page - 1))
        .limit(page_size)
    )
    return ReportPage(
        items=[report_to_response(r, viewer) for r in result.scalars().all()],
        page=page,
        total_pages=math.ceil(count / page_size),
        total_count=count,
    )


async def list_own(db: AsyncSession, user: User, page: int, page_size: int) -> ReportPage:
    return await _page(db, [Report.user_id == user.id], user, page, page_size)


async def list_for_review(
    db: AsyncSession,
    moderator: User,
    page: int,
    page_size: int,
    status: str | None = None,
    category: str | None = None,
) -> ReportPage:
    conditions = []
    if status:
        conditions.append(Report.status == status)
    if category:
        conditions.append(Report.category == category)
    return await _page(db, conditions, moderator, page, page_size)


async def update_report(db: AsyncSession, report_id: UUID, user: User, data: ReportUpdate) -> Report:
    report = await get_report_for_viewer(db, report_id, user)
    if report.user_id != user.id:
        raise UnauthorizedError("Not authorized to update this report")
    if report.status != STATUS_PENDING:
        raise ValidationError("Only pending reports can be edited")
    if data.title is not None:
        report.title = normalize_content(data.title, "Report title")
    if data.description is not None:
        report.description = normalize_content(data.description, "Report description")
    if data.category is not None:
        report.category = data.category
    report.updated_at = datetime.utcnow()
    await db.flush()
    return report


async def review_report(db: AsyncSession, report_id: UUID, moderator: User, data: ReportReview) -> Report:
    report = await get_report_for_viewer(db, report_id, moderator)
    previous = report.status
    if data.status is not None:
        report.status = data.status
        if data.status == STATUS_RESOLVED and report.resolved_at is None:
            report.resolved_at = datetime.utcnow()
    if data.priority is not None:
        report.priority = data.priority
    if data.resolution_notes is not None:
        report.resolution_notes = data.resolution_notes.strip() or None
    report.updated_at = datetime.utcnow()
    await db.flush()
    if report.status != previous:
        await notify(
            db,
            report.user_id,
            moderator,
            KIND_REPORT,
            f'Your report "{report.title}" is now {report.status}',
            report_id=report.id,
        )
    _log("Report reviewed:", report.id, previous, "->", report.status, "by", moderator.id)
    return report


async def delete_report(db: AsyncSession, report_id: UUID, user: User) -> list[dict]:
    """Reporter while pending, or a site moderator. Returns the attachments to discard."""
    report = await get_report_for_viewer(db, report_id, user)
    if not user.is_moderator:
        if report.user_id != user.id:
            raise UnauthorizedError("Not authorized to delete this report")
        if report.status != STATUS_PENDING:
            raise ValidationError("Only pending reports can be withdrawn")
    attachments = list(report.attachments or [])
    await db.delete(report)
    await db.flush()
    return attachments


def report_to_response(report: Report, viewer: User) -> ReportResponse:
    is_own = report.user_id == viewer.id
    reveal = is_own or not report.is_anonymous
    return ReportResponse(
        id=report.id,
        user_id=report.user_id if reveal else None,
        reporter=user_to_public(report.user) if reveal and report.user else None,
        title=report.title,
        description=report.description,
        category=report.category,
        status=report.status,
        priority=report.priority,
        is_anonymous=report.is_anonymous,
        attachments=[Attachment(**a) for a in (report.attachments or [])],
        resolution_notes=report.resolution_notes,
        is_own=is_own,
        created_at=report.created_at,
        updated_at=report.updated_at,
        resolved_at=report.resolved_at,
    )
