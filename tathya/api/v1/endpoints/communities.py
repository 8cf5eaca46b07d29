"""Communities: creation, listing, membership and community moderators."""
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from tathya.api.deps import get_db, get_current_user, get_current_user_optional
from tathya.core.config import settings
from tathya.models.user import User
from tathya.schemas.community import CommunityCreate, CommunityPage, CommunityResponse, ModeratorAdd
from tathya.services import community_service

router = APIRouter(prefix="/communities", tags=["communities"])


@router.post("", response_model=CommunityResponse, status_code=status.HTTP_201_CREATED)
async def create_community(
    data: CommunityCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    community = await community_service.create_community(db, current_user, data)
    await db.commit()
    return await community_service.community_to_response(db, community, current_user)


@router.get("", response_model=CommunityPage)
async def list_communities(
    page: int = Query(1, ge=1, alias="pageNumber"),
    keyword: str | None = Query(None),
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    return await community_service.list_communities(
        db, current_user, page, settings.COMMUNITY_PAGE_SIZE, keyword
    )


@router.get("/{community_id}", response_model=CommunityResponse)
async def get_community(
    community_id: UUID,
    current_user: User | None = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    community = await community_service.get_community(db, community_id)
    return await community_service.community_to_response(db, community, current_user)


@router.post("/{community_id}/join", response_model=CommunityResponse)
async def join_community(
    community_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    community = await community_service.join_community(db, community_id, current_user)
    await db.commit()
    return await community_service.community_to_response(db, community, current_user)


@router.post("/{community_id}/leave", response_model=CommunityResponse)
async def leave_community(
    community_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    community = await community_service.leave_community(db, community_id, current_user)
    await db.commit()
    return await community_service.community_to_response(db, community, current_user)


@router.post("/{community_id}/moderators", response_model=CommunityResponse)
async def add_moderator(
    community_id: UUID,
    data: ModeratorAdd,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    community = await community_service.add_moderator(db, community_id, current_user, data.user_id)
    await db.commit()
    return await community_service.community_to_response(db, community, current_user)


@router.delete("/{community_id}/moderators/{user_id}", response_model=CommunityResponse)
async def remove_moderator(
    community_id: UUID,
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    community = await community_service.remove_moderator(db, community_id, current_user, user_id)
    await db.commit()
    return await community_service.community_to_response(db, community, current_user)
