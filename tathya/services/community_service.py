"""Community business logic: creation, membership and community moderators."""
import math
from uuid import UUID

from sqlalchemy import String, cast, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.core.errors import NotFoundError, UnauthorizedError, ValidationError
from tathya.db.session import insert_ignore
from tathya.models.community import Community
from tathya.models.engagement import CommunityMember, CommunityModerator
from tathya.models.user import User
from tathya.schemas.community import CommunityCreate, CommunityPage, CommunityResponse


def _split_tags(tags: str | None) -> list[str]:
    if not tags:
        return []
    return [t.strip() for t in tags.split(",") if t.strip()]


async def get_community(db: AsyncSession, community_id: UUID) -> Community:
    result = await db.execute(select(Community).where(Community.id == community_id))
    community = result.scalar_one_or_none()
    if community is None:
        raise NotFoundError("Community not found")
    return community


async def is_member(db: AsyncSession, community_id: UUID, user_id: UUID) -> bool:
    result = await db.execute(
        select(CommunityMember.user_id).where(
            CommunityMember.community_id == community_id,
            CommunityMember.user_id == user_id,
        )
    )
    return result.first() is not None


async def is_moderator(db: AsyncSession, community_id: UUID, user_id: UUID) -> bool:
    result = await db.execute(
        select(CommunityModerator.user_id).where(
            CommunityModerator.community_id == community_id,
            CommunityModerator.user_id == user_id,
        )
    )
    return result.first() is not None


async def _add_member(db: AsyncSession, community_id: UUID, user_id: UUID) -> None:
    stmt = insert_ignore(db, CommunityMember).values(community_id=community_id, user_id=user_id)
    await db.execute(stmt.on_conflict_do_nothing(index_elements=["community_id", "user_id"]))


async def _add_moderator(db: AsyncSession, community_id: UUID, user_id: UUID) -> None:
    stmt = insert_ignore(db, CommunityModerator).values(community_id=community_id, user_id=user_id)
    await db.execute(stmt.on_conflict_do_nothing(index_elements=["community_id", "user_id"]))


async def create_community(db: AsyncSession, creator: User, data: CommunityCreate) -> Community:
    name, region, description = data.name.strip(), data.region.strip(), data.description.strip()
    if not name or not region or not description:
        raise ValidationError("Please provide name, region, and description")
    existing = await db.execute(select(Community.id).where(Community.name == name))
    if existing.first() is not None:
        raise ValidationError("A community with this name already exists")
    community = Community(name=name, region=region, description=description, tags=_split_tags(data.tags))
    db.add(community)
    await db.flush()
    # Creator becomes first member and first moderator
    await _add_member(db, community.id, creator.id)
    await _add_moderator(db, community.id, creator.id)
    return community


async def community_to_response(db: AsyncSession, community: Community, viewer: User | None) -> CommunityResponse:
    members = await db.scalar(
        select(func.count()).select_from(CommunityMember).where(CommunityMember.community_id == community.id)
    )
    moderators = await db.scalar(
        select(func.count()).select_from(CommunityModerator).where(CommunityModerator.community_id == community.id)
    )
    joined = moderating = False
    if viewer is not None:
        joined = await is_member(db, community.id, viewer.id)
        moderating = await is_moderator(db, community.id, viewer.id)
    return CommunityResponse(
        id=community.id,
        name=community.name,
        region=community.region,
        description=community.description,
        tags=community.tags or [],
        is_active=community.is_active,
        members_count=members or 0,
        moderators_count=moderators or 0,
        is_joined=joined,
        is_moderator=moderating,
        created_at=community.created_at,
    )


async def list_communities(
    db: AsyncSession,
    viewer: User | None,
    page: int,
    page_size: int,
    keyword: str | None = None,
) -> CommunityPage:
    conditions = []
    if keyword:
        pattern = f"%{keyword.strip()}%"
        conditions.append(
            or_(
                Community.name.ilike(pattern),
                Community.description.ilike(pattern),
                cast(Community.tags, String).ilike(pattern),
            )
        )
    count = await db.scalar(select(func.count()).select_from(Community).where(*conditions)) or 0
    result = await db.execute(
        select(Community)
        .where(*conditions)
        .order_by(Community.name)
        .offset(page_size * (page - 1))
        .limit(page_size)
    )
    items = [await community_to_response(db, c, viewer) for c in result.scalars().all()]
    return CommunityPage(items=items, page=page, total_pages=math.ceil(count / page_size), total_count=count)


async def join_community(db: AsyncSession, community_id: UUID, user: User) -> Community:
    community = await get_community(db, community_id)
    await _add_member(db, community.id, user.id)
    return community


async def leave_community(db: AsyncSession, community_id: UUID, user: User) -> Community:
    community = await get_community(db, community_id)
    await db.execute(
        delete(CommunityMember).where(
            CommunityMember.community_id == community.id,
            CommunityMember.user_id == user.id,
        )
    )
    return community


async def _require_community_moderator(db: AsyncSession, community: Community, user: User) -> None:
    if not (user.is_moderator or await is_moderator(db, community.id, user.id)):
        raise UnauthorizedError("Only community moderators can manage moderators")


async def add_moderator(db: AsyncSession, community_id: UUID, user: User, target_user_id: UUID) -> Community:
    community = await get_community(db, community_id)
    await _require_community_moderator(db, community, user)
    target = await db.execute(select(User.id).where(User.id == target_user_id))
    if target.first() is None:
        raise NotFoundError("User not found")
    await _add_member(db, community.id, target_user_id)
    await _add_moderator(db, community.id, target_user_id)
    return community


async def remove_moderator(db: AsyncSession, community_id: UUID, user: User, target_user_id: UUID) -> Community:
    community = await get_community(db, community_id)
    await _require_community_moderator(db, community, user)
    await db.execute(
        delete(CommunityModerator).where(
            CommunityModerator.community_id == community.id,
            CommunityModerator.user_id == target_user_id,
        )
    )
    return community
