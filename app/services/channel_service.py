# ============================================================================
# FILE: app/services/channel_service.py
# Read-only channel and watch-history queries
# ============================================================================
from typing import Optional
from sqlalchemy import func, literal, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
from app.core.result import Ok, Result, bad_request, internal, not_found
from app.db.models.history import WatchHistory
from app.db.models.subscription import Subscription
from app.db.models.user import User
from app.db.models.video import Video
from app.schemas.channel import ChannelProfile
from app.schemas.history import WatchHistoryItem
import logging

logger = logging.getLogger(__name__)

class ChannelService:
    """Service layer for subscription counts and watch history"""

    def get_channel_profile(self, db: Session, channel_username: str,
                            viewer_id: Optional[str] = None) -> Result:
        """
        Channel page for a username, as seen by an optional viewer

        All three figures come back from one query with correlated subqueries.

        Args:
            channel_username: Username of the channel (case-insensitive)
            viewer_id: Id of the user looking at the channel, if signed in

        Returns:
            Ok(ChannelProfile) or Err
        """
        username = (channel_username or "").strip().lower()
        if not username:
            return bad_request("Username is missing")

        subscribers_count = (
            select(func.count(Subscription.id))
            .where(Subscription.channel_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        subscribed_to_count = (
            select(func.count(Subscription.id))
            .where(Subscription.subscriber_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        if viewer_id:
            viewer_subscriptions = (
                select(func.count(Subscription.id))
                .where(Subscription.channel_id == User.id, Subscription.subscriber_id == viewer_id)
                .correlate(User)
                .scalar_subquery()
            )
        else:
            viewer_subscriptions = literal(0)

        try:
            row = db.query(
                User,
                subscribers_count.label("subscribers_count"),
                subscribed_to_count.label("subscribed_to_count"),
                viewer_subscriptions.label("viewer_subscriptions"),
            ).filter(User.username == username).first()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching channel {username}: {e}")
            return internal("Something went wrong while fetching channel")

        if row is None:
            return not_found("Channel does not exist")

        user, subscribers, subscribed_to, viewer_hits = row
        return Ok(ChannelProfile(
            fullname=user.fullname,
            username=user.username,
            subscribers_count=subscribers or 0,
            subscribed_to_count=subscribed_to or 0,
            is_subscribed=bool(viewer_hits),
            avatar=user.avatar,
            cover_image=user.cover_image or "",
        ))

    def get_watch_history(self, db: Session, user_id: str) -> Result:
        """Watched videos in recorded order, repeats kept, owners resolved"""
        try:
            if not db.query(User.id).filter(User.id == user_id).first():
                return not_found("User does not exist")

            entries = (
                db.query(WatchHistory)
                .options(joinedload(WatchHistory.video).joinedload(Video.owner))
                .filter(WatchHistory.user_id == user_id)
                .order_by(WatchHistory.position, WatchHistory.id)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error fetching watch history for {user_id}: {e}")
            return internal("Something went wrong while fetching watch history")

        return Ok([
            WatchHistoryItem.model_validate(entry.video)
            for entry in entries
            if entry.video is not None
        ])

# Create singleton instance
channel_service = ChannelService()
