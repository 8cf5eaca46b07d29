"""Issue report model: a student's private report to the moderators."""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from tathya.db.session import Base, JSONType

REPORT_CATEGORIES = ("Academic Pressure", "Harassment", "Discrimination", "Unfair Treatment", "Other")
REPORT_STATUSES = ("Pending", "In Review", "Resolved", "Closed")
REPORT_PRIORITIES = ("Low", "Medium", "High")
STATUS_PENDING = "Pending"
STATUS_RESOLVED = "Resolved"


class Report(Base):
    __tablename__ = "reports"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(300), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(50), nullable=False, default="Other")
    status = Column(String(20), nullable=False, default=STATUS_PENDING, index=True)
    priority = Column(String(10), nullable=False, default="Medium")
    is_anonymous = Column(Boolean, nullable=False, default=True)
    attachments = Column(JSONType, nullable=False, default=list)  # [{filename, path, mimetype, size}]
    resolution_notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    resolved_at = Column(DateTime, nullable=True)

    user = relationship("User")
