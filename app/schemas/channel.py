# ============================================================================
# FILE: app/schemas/channel.py
# ============================================================================
from pydantic import BaseModel

class ChannelProfile(BaseModel):
    """Channel page projection with derived subscription figures"""
    fullname: str
    username: str
    subscribers_count: int
    subscribed_to_count: int
    is_subscribed: bool
    avatar: str
    cover_image: str = ""
