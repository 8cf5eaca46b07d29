from tathya.schemas.user import (
    UserCreate,
    UserResponse,
    UserPublic,
    Token,
    LoginRequest,
)
from tathya.schemas.comment import CommentCreate, CommentResponse, ReplyResponse, LikeResponse, PinResponse
from tathya.schemas.post import PostCreate, PostUpdate, PostResponse
from tathya.schemas.feed import FeedPage
