"""Paged feed schema."""
from pydantic import BaseModel

from tathya.schemas.post import PostResponse


class FeedPage(BaseModel):
    items: list[PostResponse]
    page: int
    total_pages: int
    total_count: int
