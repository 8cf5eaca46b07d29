"""Direct messages between users and moderator outreach."""
from uuid import UUID

from sqlalchemy import desc, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tathya.core.errors import NotFoundError, ValidationError
from tathya.models.message import Message
from tathya.models.notification import KIND_MESSAGE
from tathya.models.user import User
from tathya.schemas.message import MessageCreate, MessageResponse
from tathya.services.auth_service import get_user_by_id, user_to_public
from tathya.services.notification_service import notify


async def send_message(db: AsyncSession, sender: User, data: MessageCreate) -> Message:
    content = (data.content or "").strip()
    if data.to is None or not content:
        raise ValidationError("Please provide recipient and message content")
    if data.to == sender.id:
        raise ValidationError("You cannot message yourself")
    recipient = await get_user_by_id(db, data.to)
    if recipient is None:
        raise NotFoundError("Recipient not found")

    message = Message(sender_id=sender.id, recipient_id=recipient.id, content=content)
    db.add(message)
    await db.flush()
    preview = content[:50] + "..." if len(content) > 50 else content
    await notify(db, recipient.id, sender, KIND_MESSAGE, f'{sender.full_name}: "{preview}"')
    await db.refresh(message, attribute_names=["sender", "recipient"])
    return message


async def list_conversations(db: AsyncSession, user: User, with_user_id: UUID | None = None) -> list[Message]:
    """Messages the user sent or received, newest first; optionally with one other user."""
    conditions = [or_(Message.sender_id == user.id, Message.recipient_id == user.id)]
    if with_user_id is not None:
        conditions.append(or_(Message.sender_id == with_user_id, Message.recipient_id == with_user_id))
    result = await db.execute(
        select(Message)
        .options(selectinload(Message.sender), selectinload(Message.recipient))
        .where(*conditions)
        .order_by(desc(Message.created_at))
    )
    return list(result.scalars().all())


async def mark_read(db: AsyncSession, user: User, message_id: UUID) -> bool:
    """Only the recipient can mark a message read."""
    result = await db.execute(
        update(Message)
        .where(Message.id == message_id, Message.recipient_id == user.id, Message.is_read.is_(False))
        .values(is_read=True)
    )
    return (result.rowcount or 0) > 0


def message_to_response(message: Message) -> MessageResponse:
    return MessageResponse(
        id=message.id,
        sender=user_to_public(message.sender),
        recipient=user_to_public(message.recipient),
        content=message.content,
        is_read=message.is_read,
        created_at=message.created_at,
    )
