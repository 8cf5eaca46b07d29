"""Community model."""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String, Text, Uuid
from sqlalchemy.orm import relationship

from tathya.db.session import Base, JSONType


class Community(Base):
    __tablename__ = "communities"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(120), unique=True, nullable=False, index=True)
    region = Column(String(120), nullable=False)
    description = Column(Text, nullable=False)
    tags = Column(JSONType, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    posts = relationship("Post", back_populates="community")
    members = relationship("CommunityMember", back_populates="community", cascade="all, delete-orphan")
    moderators = relationship("CommunityModerator", back_populates="community", cascade="all, delete-orphan")
