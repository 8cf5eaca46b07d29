"""SQLAlchemy declarative base and model imports for Alembic."""
from tathya.db.session import Base  # noqa: F401
from tathya.models.user import User  # noqa: F401
from tathya.models.community import Community  # noqa: F401
from tathya.models.post import Post  # noqa: F401
from tathya.models.comment import Comment  # noqa: F401
from tathya.models.engagement import CommentLike, CommunityMember, CommunityModerator, PostLike  # noqa: F401
from tathya.models.report import Report  # noqa: F401
from tathya.models.document import Document  # noqa: F401
from tathya.models.message import Message  # noqa: F401
from tathya.models.notification import Notification  # noqa: F401
from tathya.models.resume import Resume  # noqa: F401

__all__ = [
    "Base",
    "User",
    "Community",
    "Post",
    "Comment",
    "PostLike",
    "CommentLike",
    "CommunityMember",
    "CommunityModerator",
    "Report",
    "Document",
    "Message",
    "Notification",
    "Resume",
]
