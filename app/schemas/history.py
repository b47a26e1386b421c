# ============================================================================
# FILE: app/schemas/history.py
# ============================================================================
from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class OwnerSummary(BaseModel):
    """Denormalized owner of a video"""
    fullname: str
    username: str
    avatar: str

    class Config:
        from_attributes = True

class WatchHistoryItem(BaseModel):
    """A watched video with its owner resolved"""
    id: str
    video_file: str
    thumbnail: str
    title: str
    description: Optional[str] = None
    duration: float = 0
    views: int = 0
    is_published: bool = True
    created_at: Optional[datetime] = None
    owner: OwnerSummary

    class Config:
        from_attributes = True
