from tathya.models.user import User
from tathya.models.community import Community
from tathya.models.post import Post
from tathya.models.comment import Comment
from tathya.models.engagement import CommentLike, CommunityMember, CommunityModerator, PostLike
from tathya.models.report import Report
from tathya.models.document import Document
from tathya.models.message import Message
from tathya.models.notification import Notification
from tathya.models.resume import Resume

__all__ = [
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
