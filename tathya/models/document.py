"""Uploaded personal document (certificates, transcripts) awaiting verification."""
import uuid
from datetime import datetime

from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from tathya.db.session import Base

DOCUMENT_PENDING = "Pending"
DOCUMENT_VERIFIED = "Verified"
DOCUMENT_REJECTED = "Rejected"


class Document(Base):
    __tablename__ = "documents"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    type = Column(String(20), nullable=False)  # PDF, JPG, DOCX...
    filename = Column(String(255), nullable=False)
    path = Column(Text, nullable=False)
    mimetype = Column(String(120), nullable=False)
    size = Column(BigInteger, nullable=False)
    status = Column(String(20), nullable=False, default=DOCUMENT_PENDING)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User")
