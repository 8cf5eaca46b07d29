"""Activity notification model.

One row per event delivered to a recipient. The target columns locate what the
event is about: a post, a comment or reply in it (with the reply's top-level
comment in ``parent_comment_id``), or a report.
"""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from tathya.db.session import Base

KIND_LIKE = "like"
KIND_COMMENT = "comment"
KIND_REPLY = "reply"
KIND_MESSAGE = "message"
KIND_REPORT = "report"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    recipient_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    actor_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    kind = Column(String(20), nullable=False)
    text = Column(Text, nullable=False)
    post_id = Column(Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=True)
    comment_id = Column(Uuid, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True)
    parent_comment_id = Column(Uuid, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True)
    report_id = Column(Uuid, ForeignKey("reports.id", ondelete="CASCADE"), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    recipient = relationship("User", foreign_keys=[recipient_id], back_populates="notifications")
    actor = relationship("User", foreign_keys=[actor_id])
