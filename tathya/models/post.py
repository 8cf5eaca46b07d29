"""Post model: the owner of its comment/reply tree and like-sets."""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from tathya.db.session import Base, JSONType


class Post(Base):
    __tablename__ = "posts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    community_id = Column(Uuid, ForeignKey("communities.id", ondelete="SET NULL"), nullable=True, index=True)
    title = Column(String(300), nullable=False)
    content = Column(Text, nullable=False)
    attachments = Column(JSONType, nullable=False, default=list)  # [{filename, path, mimetype, size}]
    is_anonymous = Column(Boolean, nullable=False, default=True)
    is_visible = Column(Boolean, nullable=False, default=True)
    approved = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="posts")
    community = relationship("Community", back_populates="posts")
    # Flat list of comments and replies in storage (insertion) order
    comments = relationship(
        "Comment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )
    likes = relationship(
        "PostLike",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostLike.created_at",
    )
