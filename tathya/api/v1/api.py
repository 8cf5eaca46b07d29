"""V1 API router aggregation."""
from fastapi import APIRouter

from tathya.api.v1.endpoints import (
    auth,
    communities,
    documents,
    messages,
    moderator,
    notifications,
    posts,
    reports,
    resume,
)

api_router = APIRouter(prefix="/v1")
api_router.include_router(auth.router)
api_router.include_router(posts.router)
api_router.include_router(communities.router)
api_router.include_router(reports.router)
api_router.include_router(documents.router)
api_router.include_router(messages.router)
api_router.include_router(moderator.router)
api_router.include_router(notifications.router)
api_router.include_router(resume.router)
