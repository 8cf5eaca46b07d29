"""Posts: feed, aggregate CRUD, comments, replies, likes and pins."""
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.api.deps import get_db, get_current_user, get_current_user_optional
from tathya.core.config import settings
from tathya.domain.thread import LikeTarget
from tathya.models.user import User
from tathya.schemas.comment import CommentAdded, CommentCreate, CommentResponse, LikeResponse, PinResponse
from tathya.schemas.feed import FeedPage
from tathya.schemas.post import PostCreate, PostResponse, PostUpdate
from tathya.services import feed_service, like_service, post_service
from tathya.services.attachment_service import discard_attachments, read_attachments, store_attachments
from tathya.services.storage_service import get_storage


def _log(msg: str, *args):
    print(f"[Posts] {msg}", *args)


router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=FeedPage)
async def list_posts(
    page: int = Query(1, ge=1, alias="pageNumber"),
    page_size: int | None = Query(None, ge=1, le=50, alias="pageSize"),
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    return await feed_service.list_recent(db, current_user, page, page_size or settings.FEED_PAGE_SIZE)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post_endpoint(
    title: str = Form(""),
    content: str = Form(""),
    community_id: UUID | None = Form(None),
    is_anonymous: bool = Form(True),
    attachments: list[UploadFile] | None = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    data = PostCreate(title=title, content=content, community_id=community_id, is_anonymous=is_anonymous)
    loaded = await read_attachments(attachments or [])
    storage = get_storage()
    stored = store_attachments(storage, str(current_user.id), loaded)
    try:
        post = await post_service.create_post(db, current_user, data, stored)
        await db.commit()
    except Exception:
        discard_attachments(storage, stored)
        raise
    _log("Post created:", post.id, "attachments:", len(stored))
    return post_service.post_to_response(post, current_user)


@router.get("/community/{community_id}", response_model=FeedPage)
async def list_community_posts(
    community_id: UUID,
    page: int = Query(1, ge=1, alias="pageNumber"),
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    return await feed_service.list_community(db, community_id, current_user, page, settings.COMMUNITY_PAGE_SIZE)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: UUID,
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    post = await post_service.get_post_for_viewer(db, post_id, current_user)
    return post_service.post_to_response(post, current_user)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post_endpoint(
    post_id: UUID,
    data: PostUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    post = await post_service.update_post(db, post_id, current_user, data)
    await db.commit()
    return post_service.post_to_response(post, current_user)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post_endpoint(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    attachments = await post_service.delete_post(db, post_id, current_user)
    await db.commit()
    discard_attachments(get_storage(), attachments)
    _log("Post deleted:", post_id)
    return None


@router.post("/{post_id}/like", response_model=LikeResponse)
async def like_post(
    post_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await like_service.toggle_like(db, LikeTarget(post_id), current_user)
    await db.commit()
    return LikeResponse(likes=result.likes, liked=result.liked, liked_by=result.liked_by)


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    post_id: UUID,
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    post = await post_service.get_post_for_viewer(db, post_id, current_user)
    return post_service.build_thread(list(post.comments), current_user)


@router.post("/{post_id}/comments", response_model=CommentAdded, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: UUID,
    data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await post_service.add_comment(db, post_id, current_user, data.content, data.reply_to)
    await db.commit()
    if comment.parent_id is None:
        node = post_service.comment_to_response(comment, [], current_user)
    else:
        node = post_service.reply_to_response(comment, current_user)
    return CommentAdded(id=comment.id, parent_id=comment.parent_id, comment=node)


@router.post("/{post_id}/comments/{comment_id}/like", response_model=LikeResponse)
async def like_comment(
    post_id: UUID,
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await like_service.toggle_like(db, LikeTarget(post_id, comment_id), current_user)
    await db.commit()
    return LikeResponse(likes=result.likes, liked=result.liked, liked_by=result.liked_by)


@router.post("/{post_id}/comments/{comment_id}/replies/{reply_id}/like", response_model=LikeResponse)
async def like_reply(
    post_id: UUID,
    comment_id: UUID,
    reply_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await like_service.toggle_like(db, LikeTarget(post_id, comment_id, reply_id), current_user)
    await db.commit()
    return LikeResponse(likes=result.likes, liked=result.liked, liked_by=result.liked_by)


@router.post("/{post_id}/comments/{comment_id}/pin", response_model=PinResponse)
async def pin_comment(
    post_id: UUID,
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    pinned = await post_service.toggle_pin(db, post_id, comment_id, current_user)
    await db.commit()
    return PinResponse(pinned=pinned)
