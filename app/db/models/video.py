# ============================================================================
# FILE: app/db/models/video.py
# ============================================================================
from sqlalchemy import Boolean, Column, Integer, Float, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from app.db.base import Base
import uuid

class Video(Base):
    """Uploaded video; only the fields needed for history listings"""
    __tablename__ = "videos"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    video_file = Column(String, nullable=False)
    thumbnail = Column(String, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Float, default=0)
    views = Column(Integer, default=0)
    is_published = Column(Boolean, default=True)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    owner = relationship("User", back_populates="videos")
