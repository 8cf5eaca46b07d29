"""Notifications for the signed-in user."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.api.deps import get_db, get_current_user
from tathya.core.config import settings
from tathya.models.user import User
from tathya.schemas.notification import NotificationPage, NotificationResponse
from tathya.services import notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationPage)
async def list_notifications(
    page: int = Query(1, ge=1, alias="pageNumber"),
    unread_only: bool = Query(False, alias="unreadOnly"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await notification_service.list_page(
        db, current_user, page, settings.NOTIFICATION_PAGE_SIZE, unread_only
    )


@router.get("/unread-count")
async def unread_count(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return {"count": await notification_service.unread_count(db, current_user)}


@router.post("/mark-all-read")
async def mark_all_read(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    updated = await notification_service.mark_all_read(db, current_user)
    await db.commit()
    return {"updated": updated}


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    notification = await notification_service.mark_read(db, current_user, notification_id)
    await db.commit()
    return notification_service.notification_to_response(notification)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await notification_service.delete_notification(db, current_user, notification_id)
    await db.commit()
    return None
