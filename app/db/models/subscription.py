# ============================================================================
# FILE: app/db/models/subscription.py
# ============================================================================
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from datetime import datetime
from app.db.base import Base

class Subscription(Base):
    """Directed edge: subscriber follows channel (both are users)"""
    __tablename__ = "subscriptions"
    __table_args__ = (UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriber_channel"),)

    id = Column(Integer, primary_key=True, index=True)
    subscriber_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    channel_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
