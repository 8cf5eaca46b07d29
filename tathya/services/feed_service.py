"""Feed paging: recent posts, community posts and the moderation queue."""
import math
from uuid import UUID

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.models.post import Post
from tathya.models.user import User
from tathya.schemas.feed import FeedPage
from tathya.services import community_service
from tathya.services.post_service import aggregate_query, post_to_response

PUBLIC_FILTER = (Post.is_visible.is_(True), Post.approved.is_(True))


async def _page(
    db: AsyncSession,
    conditions: tuple,
    viewer: User | None,
    page: int,
    page_size: int,
) -> FeedPage:
    """Offset paging, newest first. Concurrent inserts may shift later pages."""
    count = await db.scalar(select(func.count()).select_from(Post).where(*conditions)) or 0
    result = await db.execute(
        aggregate_query()
        .where(*conditions)
        .order_by(desc(Post.created_at))
        .offset(page_size * (page - 1))
        .limit(page_size)
    )
    posts = result.scalars().all()
    return FeedPage(
        items=[post_to_response(p, viewer) for p in posts],
        page=page,
        total_pages=math.ceil(count / page_size),
        total_count=count,
    )


async def list_recent(db: AsyncSession, viewer: User | None, page: int, page_size: int) -> FeedPage:
    return await _page(db, PUBLIC_FILTER, viewer, page, page_size)


async def list_community(
    db: AsyncSession,
    community_id: UUID,
    viewer: User | None,
    page: int,
    page_size: int,
) -> FeedPage:
    community = await community_service.get_community(db, community_id)
    return await _page(db, (*PUBLIC_FILTER, Post.community_id == community.id), viewer, page, page_size)


async def list_moderation_queue(db: AsyncSession, moderator: User, page: int, page_size: int) -> FeedPage:
    """Every visible post, approved or not."""
    return await _page(db, (Post.is_visible.is_(True),), moderator, page, page_size)
