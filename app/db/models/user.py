# ============================================================================
# FILE: app/db/models/user.py
# ============================================================================
from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from app.db.base import Base
import uuid

class User(Base):
    """User model for authentication, profile and channel features"""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    fullname = Column(String, nullable=False)
    avatar = Column(String, nullable=False)
    cover_image = Column(String, nullable=False, default="")
    hashed_password = Column(String, nullable=False)
    refresh_token = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    videos = relationship("Video", back_populates="owner")
    watch_history = relationship(
        "WatchHistory",
        back_populates="user",
        order_by="WatchHistory.position",
        cascade="all, delete-orphan",
    )
