"""Moderator-only routes: approval queue, visibility, removal, users, reports and outreach."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.api.deps import get_db, get_current_moderator
from tathya.core.config import settings
from tathya.models.user import User
from tathya.schemas.feed import FeedPage
from tathya.schemas.message import MessageCreate, MessageResponse
from tathya.schemas.post import PostResponse, VisibilityUpdate
from tathya.schemas.report import ReportCategory, ReportPage, ReportResponse, ReportReview, ReportStatus
from tathya.schemas.user import UserResponse
from tathya.services import feed_service, message_service, moderation_service, report_service
from tathya.services.attachment_service import discard_attachments
from tathya.services.auth_service import user_to_response
from tathya.services.post_service import post_to_response
from tathya.services.storage_service import get_storage

router = APIRouter(prefix="/moderator", tags=["moderator"])


@router.get("/posts", response_model=FeedPage)
async def moderation_queue(
    page: int = Query(1, ge=1, alias="pageNumber"),
    moderator: User = Depends(get_current_moderator),
    db: AsyncSession = Depends(get_db),
):
    return await feed_service.list_moderation_queue(db, moderator, page, settings.MODERATION_PAGE_SIZE)


@router.put("/posts/{post_id}/approve", response_model=PostResponse)
async def approve_post(
    post_id: UUID,
    moderator: User = Depends(get_current_moderator),
    db: AsyncSession = Depends(get_db),
):
    post = await moderation_service.approve_post(db, post_id, moderator)
    await db.commit()
    return post_to_response(post, moderator)


@router.put("/posts/{post_id}/visibility", response_model=PostResponse)
async def set_visibility(
    post_id: UUID,
    data: VisibilityUpdate,
    moderator: User = Depends(get_current_moderator),
    db: AsyncSession = Depends(get_db),
):
    post = await moderation_service.set_visibility(db, post_id, moderator, data.is_visible)
    await db.commit()
    return post_to_response(post, moderator)


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: UUID,
    moderator: User = Depends(get_current_moderator),
    db: AsyncSession = Depends(get_db),
):
    attachments = await moderation_service.remove_post(db, post_id, moderator)
    await db.commit()
    discard_attachments(get_storage(), attachments)
    return None


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    moderator: User = Depends(get_current_moderator),
    db: AsyncSession = Depends(get_db),
):
    users = await moderation_service.list_users(db, moderator)
    return [user_to_response(u, include_email=True) for u in users]


@router.get("/reports", response_model=ReportPage)
async def list_reports(
    page: int = Query(1, ge=1, alias="pageNumber"),
    report_status: ReportStatus | None = Query(None, alias="status"),
    category: ReportCategory | None = Query(None),
    moderator: User = Depends(get_current_moderator),
    db: AsyncSession = Depends(get_db),
):
    return await report_service.list_for_review(
        db, moderator, page, settings.REPORT_PAGE_SIZE, report_status, category
    )


@router.put("/reports/{report_id}", response_model=ReportResponse)
async def review_report(
    report_id: UUID,
    data: ReportReview,
    moderator: User = Depends(get_current_moderator),
    db: AsyncSession = Depends(get_db),
):
    report = await report_service.review_report(db, report_id, moderator, data)
    await db.commit()
    return report_service.report_to_response(report, moderator)


@router.post("/messages", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    data: MessageCreate,
    moderator: User = Depends(get_current_moderator),
    db: AsyncSession = Depends(get_db),
):
    message = await message_service.send_message(db, moderator, data)
    await db.commit()
    return message_service.message_to_response(message)


@router.get("/messages", response_model=list[MessageResponse])
async def list_messages(
    moderator: User = Depends(get_current_moderator),
    db: AsyncSession = Depends(get_db),
):
    messages = await message_service.list_conversations(db, moderator)
    return [message_service.message_to_response(m) for m in messages]
