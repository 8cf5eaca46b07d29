"""Direct messages for the signed-in user."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.api.deps import get_db, get_current_user
from tathya.models.user import User
from tathya.schemas.message import MessageCreate, MessageResponse
from tathya.services import message_service

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("", response_model=list[MessageResponse])
async def list_messages(
    with_user: UUID | None = Query(None, alias="with"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    messages = await message_service.list_conversations(db, current_user, with_user)
    return [message_service.message_to_response(m) for m in messages]


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    data: MessageCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    message = await message_service.send_message(db, current_user, data)
    await db.commit()
    return message_service.message_to_response(message)


@router.put("/{message_id}/read")
async def mark_read(
    message_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    updated = await message_service.mark_read(db, current_user, message_id)
    await db.commit()
    return {"updated": updated}
