"""Engagement models: like-set rows and community membership.

Each set member is one row keyed by (target, user), so membership can be
added or removed atomically and never duplicates.
"""
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from tathya.db.session import Base


class PostLike(Base):
    __tablename__ = "post_likes"

    post_id = Column(Uuid, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    post = relationship("Post", back_populates="likes")


class CommentLike(Base):
    """Like on a top-level comment or on a reply."""
    __tablename__ = "comment_likes"

    comment_id = Column(Uuid, ForeignKey("comments.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    comment = relationship("Comment", back_populates="likes")


class CommunityMember(Base):
    __tablename__ = "community_members"

    community_id = Column(Uuid, ForeignKey("communities.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    community = relationship("Community", back_populates="members")


class CommunityModerator(Base):
    __tablename__ = "community_moderators"

    community_id = Column(Uuid, ForeignKey("communities.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    community = relationship("Community", back_populates="moderators")
