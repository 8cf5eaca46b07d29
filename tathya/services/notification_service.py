"""Activity notifications.

``notify`` writes the row in the caller's transaction and queues a push for
it. Actors are never notified about their own activity. Every query is scoped
to the recipient, so another user's notification id behaves as missing.
"""
import math
from uuid import UUID

from sqlalchemy import delete, desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tathya.core.errors import NotFoundError
from tathya.models.notification import (
    KIND_COMMENT,
    KIND_LIKE,
    KIND_MESSAGE,
    KIND_REPLY,
    KIND_REPORT,
    Notification,
)
from tathya.models.user import User
from tathya.schemas.notification import NotificationPage, NotificationResponse, NotificationTarget
from tathya.services.auth_service import user_to_public
from tathya.workers import notifications as push

PUSH_TITLES = {
    KIND_LIKE: "New like",
    KIND_COMMENT: "New comment",
    KIND_REPLY: "New reply",
    KIND_MESSAGE: "New message",
    KIND_REPORT: "Report update",
}


async def notify(
    db: AsyncSession,
    recipient_id: UUID,
    actor: User | None,
    kind: str,
    text: str,
    *,
    post_id: UUID | None = None,
    comment_id: UUID | None = None,
    parent_comment_id: UUID | None = None,
    report_id: UUID | None = None,
) -> Notification | None:
    if kind not in PUSH_TITLES:
        raise ValueError(f"Unknown notification kind: {kind}")
    if actor is not None and actor.id == recipient_id:
        return None
    notification = Notification(
        recipient_id=recipient_id,
        actor_id=actor.id if actor else None,
        kind=kind,
        text=text,
        post_id=post_id,
        comment_id=comment_id,
        parent_comment_id=parent_comment_id,
        report_id=report_id,
    )
    db.add(notification)
    push.send_push_notification.delay(str(recipient_id), PUSH_TITLES[kind], text)
    return notification


def _owned(user: User):
    return Notification.recipient_id == user.id


async def unread_count(db: AsyncSession, user: User) -> int:
    count = await db.scalar(
        select(func.count()).select_from(Notification).where(_owned(user), Notification.is_read.is_(False))
    )
    return count or 0


async def list_page(
    db: AsyncSession,
    user: User,
    page: int,
    page_size: int,
    unread_only: bool = False,
) -> NotificationPage:
    conditions = [_owned(user)]
    if unread_only:
        conditions.append(Notification.is_read.is_(False))
    count = await db.scalar(select(func.count()).select_from(Notification).where(*conditions)) or 0
    result = await db.execute(
        select(Notification)
        .options(selectinload(Notification.actor))
        .where(*conditions)
        .order_by(desc(Notification.created_at))
        .offset(page_size * (page - 1))
        .limit(page_size)
    )
    return NotificationPage(
        items=[notification_to_response(n) for n in result.scalars().all()],
        page=page,
        total_pages=math.ceil(count / page_size),
        total_count=count,
        unread_count=await unread_count(db, user),
    )


async def _get_own(db: AsyncSession, user: User, notification_id: UUID) -> Notification:
    result = await db.execute(
        select(Notification)
        .options(selectinload(Notification.actor))
        .where(Notification.id == notification_id, _owned(user))
    )
    notification = result.scalar_one_or_none()
    if notification is None:
        raise NotFoundError("Notification not found")
    return notification


async def mark_read(db: AsyncSession, user: User, notification_id: UUID) -> Notification:
    notification = await _get_own(db, user, notification_id)
    notification.is_read = True
    await db.flush()
    return notification


async def mark_all_read(db: AsyncSession, user: User) -> int:
    result = await db.execute(
        update(Notification).where(_owned(user), Notification.is_read.is_(False)).values(is_read=True)
    )
    return result.rowcount or 0


async def delete_notification(db: AsyncSession, user: User, notification_id: UUID) -> None:
    result = await db.execute(delete(Notification).where(Notification.id == notification_id, _owned(user)))
    if not result.rowcount:
        raise NotFoundError("Notification not found")


def notification_to_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=notification.id,
        kind=notification.kind,
        text=notification.text,
        actor=user_to_public(notification.actor) if notification.actor else None,
        target=NotificationTarget(
            post_id=notification.post_id,
            comment_id=notification.comment_id,
            parent_comment_id=notification.parent_comment_id,
            report_id=notification.report_id,
        ),
        is_read=notification.is_read,
        created_at=notification.created_at,
    )
