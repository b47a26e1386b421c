# ============================================================================
# FILE: app/services/user_service.py
# Registration, login, token rotation and account maintenance
# ============================================================================
from typing import Optional, Union
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.cache import cache, user_profile_key, RedisCache
from app.core.media import MediaUploader, discard_staged, media_uploader
from app.core.result import (
    Ok, Result, bad_request, conflict, internal, not_found, unauthorized,
)
from app.core.security import (
    TokenSigner, TokenVerificationError, get_password_hash, token_signer, verify_password,
)
from app.config import settings
from app.db.models.history import WatchHistory
from app.db.models.user import User
from app.db.models.video import Video
from app.schemas.user import (
    LoginResult, PasswordChange, ProfileUpdate, TokenPair, UserLogin, UserPublic, UserRegister,
)
import logging

logger = logging.getLogger(__name__)

class UserService:
    """Service layer for user identity and session operations"""

    def __init__(self, uploader: MediaUploader = None, signer: TokenSigner = None,
                 profile_cache: RedisCache = None):
        self.uploader = uploader or media_uploader
        self.signer = signer or token_signer
        self.cache = profile_cache or cache

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    async def register(self, db: Session, data: UserRegister,
                       avatar_path: Optional[str] = None, cover_path: Optional[str] = None) -> Result:
        """
        Create a new account from already-staged avatar/cover files

        Returns:
            Ok(UserPublic) or Err
        """
        if any(not (field or "").strip() for field in (data.fullname, data.email, data.username, data.password)):
            discard_staged(avatar_path, cover_path)
            return bad_request("All fields are required")

        if not avatar_path:
            discard_staged(cover_path)
            return bad_request("Avatar is required")

        username = data.username.strip().lower()
        email = data.email.strip().lower()
        if "@" not in email:
            discard_staged(avatar_path, cover_path)
            return bad_request("Invalid email address")

        try:
            existing = db.query(User).filter(
                or_(User.username == username, User.email == email)
            ).first()
        except SQLAlchemyError as e:
            logger.error(f"Error checking existing user: {e}")
            discard_staged(avatar_path, cover_path)
            return internal("Something went wrong while registering")

        if existing:
            discard_staged(avatar_path, cover_path)
            return conflict("User already registered")

        avatar = await self.uploader.upload(avatar_path)
        if not avatar:
            discard_staged(cover_path)
            return internal("Could not upload avatar")

        # A missing or failed cover image is not fatal
        cover = await self.uploader.upload(cover_path) if cover_path else None

        user = User(
            fullname=data.fullname.strip(),
            avatar=avatar["url"],
            cover_image=cover["url"] if cover else "",
            email=email,
            username=username,
            hashed_password=get_password_hash(data.password),
        )
        try:
            db.add(user)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            self._log_orphaned_media(avatar, cover, e)
            return conflict("User already registered")
        except SQLAlchemyError as e:
            db.rollback()
            self._log_orphaned_media(avatar, cover, e)
            return internal("Something went wrong while registering")

        try:
            created = db.query(User).filter(User.id == user.id).first()
        except SQLAlchemyError as e:
            logger.error(f"Error reading back new user: {e}")
            created = None
        if not created:
            return internal("Something went wrong while registering")

        logger.info(f"User registered: {created.username}")
        return Ok(UserPublic.model_validate(created))

    def _log_orphaned_media(self, avatar: Optional[dict], cover: Optional[dict], error: Exception) -> None:
        urls = [m["url"] for m in (avatar, cover) if m]
        logger.error(f"Error creating user: {error}")
        logger.warning(f"Uploaded media left orphaned: {', '.join(urls)}")

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------
    def login(self, db: Session, data: UserLogin) -> Result:
        """Authenticate by username or email and issue a fresh token pair"""
        username = (data.username or "").strip().lower()
        email = (data.email or "").strip().lower()
        if not username and not email:
            return bad_request("Username or email is required")

        conditions = []
        if username:
            conditions.append(User.username == username)
        if email:
            conditions.append(User.email == email)

        try:
            user = db.query(User).filter(or_(*conditions)).first()
        except SQLAlchemyError as e:
            logger.error(f"Error looking up user for login: {e}")
            return internal("Something went wrong while logging in")

        if not user:
            return not_found("User does not exist")

        if not verify_password(data.password, user.hashed_password):
            return unauthorized("Invalid user credentials")

        tokens = self._generate_tokens(db, user.id)
        if not tokens.ok:
            return tokens

        logger.info(f"User logged in: {user.username}")
        return Ok(LoginResult(
            user=UserPublic.model_validate(user),
            access_token=tokens.value.access_token,
            refresh_token=tokens.value.refresh_token,
        ))

    def _generate_tokens(self, db: Session, user_id: str, current_token: Optional[str] = None) -> Result:
        """
        Sign a new access/refresh pair and store the refresh token

        When current_token is given the write only lands if the stored token
        still equals it, so a rotated token can never be rotated twice.
        """
        try:
            user = db.query(User).filter(User.id == user_id).first()
            if user is None:
                raise LookupError(f"User {user_id} not found")

            access_token = self.signer.create_access_token(user)
            refresh_token = self.signer.create_refresh_token(user)

            query = db.query(User).filter(User.id == user_id)
            if current_token is not None:
                query = query.filter(User.refresh_token == current_token)
            updated = query.update({User.refresh_token: refresh_token}, synchronize_session=False)
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error generating tokens for user {user_id}: {e}")
            return internal("Something went wrong while generating tokens")

        if updated == 0:
            if current_token is not None:
                return unauthorized("Refresh token is expired or used")
            return internal("Something went wrong while generating tokens")

        return Ok(TokenPair(access_token=access_token, refresh_token=refresh_token))

    def logout(self, db: Session, user_id: str) -> Result:
        """Forget the stored refresh token; safe to repeat"""
        try:
            db.query(User).filter(User.id == user_id).update(
                {User.refresh_token: None}, synchronize_session=False
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error logging out user {user_id}: {e}")
            return internal("Something went wrong while logging out")

        logger.info(f"User logged out: {user_id}")
        return Ok(None)

    def refresh_access_token(self, db: Session, presented_token: Optional[str]) -> Result:
        """Exchange the current refresh token for a new pair (rotation)"""
        if not presented_token:
            return unauthorized("Unauthorized request")

        try:
            payload = self.signer.decode_refresh_token(presented_token)
        except TokenVerificationError as e:
            return unauthorized(str(e) or "Invalid refresh token")

        user_id = payload.get("sub")
        try:
            user = db.query(User).filter(User.id == user_id).first() if user_id else None
        except SQLAlchemyError as e:
            logger.error(f"Error loading user for refresh: {e}")
            return internal("Something went wrong while refreshing tokens")

        if not user:
            return unauthorized("Invalid refresh token")

        if presented_token != user.refresh_token:
            logger.warning(f"Stale refresh token presented for user {user.id}")
            return unauthorized("Refresh token is expired or used")

        return self._generate_tokens(db, user.id, current_token=presented_token)

    # ------------------------------------------------------------------
    # Account maintenance
    # ------------------------------------------------------------------
    def change_password(self, db: Session, user_id: str, data: PasswordChange) -> Result:
        if not (data.new_password or "").strip():
            return bad_request("New password is required")

        try:
            user = db.query(User).filter(User.id == user_id).first()
            if not user:
                return not_found("User does not exist")

            if not verify_password(data.old_password, user.hashed_password):
                return bad_request("Invalid old password")

            user.hashed_password = get_password_hash(data.new_password)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error changing password for user {user_id}: {e}")
            return internal("Something went wrong while changing password")

        logger.info(f"Password changed for user {user_id}")
        return Ok(None)

    def get_current_user(self, user: Union[User, UserPublic]) -> Result:
        """The caller was resolved upstream; just project it"""
        if isinstance(user, UserPublic):
            return Ok(user)
        return Ok(UserPublic.model_validate(user))

    def resolve_identity(self, db: Session, user_id: str) -> Result:
        """Load the public projection for an authenticated user id, cache first"""
        cached = self.cache.get_cache(user_profile_key(user_id))
        if cached:
            return Ok(UserPublic.model_validate(cached))

        try:
            user = db.query(User).filter(User.id == user_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Error resolving user {user_id}: {e}")
            return internal("Something went wrong while resolving user")

        if not user:
            return unauthorized("Invalid access token")

        public = UserPublic.model_validate(user)
        self.cache.set_cache(user_profile_key(user_id), public.model_dump(mode="json"),
                             expire=settings.CACHE_EXPIRE_SECONDS)
        return Ok(public)

    def update_profile(self, db: Session, user_id: str, data: ProfileUpdate) -> Result:
        """Update fullname and/or email"""
        fullname = (data.fullname or "").strip()
        email = (data.email or "").strip().lower()
        if not fullname and not email:
            return bad_request("Fullname or email is required")
        if email and "@" not in email:
            return bad_request("Invalid email address")

        try:
            user = db.query(User).filter(User.id == user_id).first()
            if not user:
                return not_found("User does not exist")

            if email and email != user.email:
                taken = db.query(User).filter(User.email == email, User.id != user_id).first()
                if taken:
                    return conflict("Email is already in use")

            if fullname:
                user.fullname = fullname
            if email:
                user.email = email
            db.commit()
            db.refresh(user)
        except IntegrityError:
            db.rollback()
            return conflict("Email is already in use")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error updating account {user_id}: {e}")
            return internal("Something went wrong while updating account")

        self.cache.delete_cache(user_profile_key(user_id))
        logger.info(f"Account updated: {user.username}")
        return Ok(UserPublic.model_validate(user))

    async def update_avatar(self, db: Session, user_id: str, local_path: Optional[str]) -> Result:
        return await self._update_image(db, user_id, local_path, "avatar", "Avatar")

    async def update_cover_image(self, db: Session, user_id: str, local_path: Optional[str]) -> Result:
        return await self._update_image(db, user_id, local_path, "cover_image", "Cover image")

    async def _update_image(self, db: Session, user_id: str, local_path: Optional[str],
                            column: str, label: str) -> Result:
        if not local_path:
            return bad_request(f"{label} file is missing")

        try:
            user = db.query(User).filter(User.id == user_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Error loading user {user_id}: {e}")
            discard_staged(local_path)
            return internal(f"Something went wrong while updating {label.lower()}")

        if not user:
            discard_staged(local_path)
            return not_found("User does not exist")

        uploaded = await self.uploader.upload(local_path)
        if not uploaded:
            return internal(f"Error while uploading {label.lower()}")

        # The previous image is left in the media store
        try:
            setattr(user, column, uploaded["url"])
            db.commit()
            db.refresh(user)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error saving {label.lower()} for user {user_id}: {e}")
            logger.warning(f"Uploaded media left orphaned: {uploaded['url']}")
            return internal(f"Something went wrong while updating {label.lower()}")

        self.cache.delete_cache(user_profile_key(user_id))
        logger.info(f"{label} updated for user {user.username}")
        return Ok(UserPublic.model_validate(user))

    def record_watch(self, db: Session, user_id: str, video_id: str) -> Result:
        """Append a video to the user's watch history"""
        try:
            if not db.query(User.id).filter(User.id == user_id).first():
                return not_found("User does not exist")
            if not db.query(Video.id).filter(Video.id == video_id).first():
                return not_found("Video does not exist")

            last = db.query(func.max(WatchHistory.position)).filter(
                WatchHistory.user_id == user_id
            ).scalar()
            entry = WatchHistory(
                user_id=user_id,
                video_id=video_id,
                position=0 if last is None else last + 1,
            )
            db.add(entry)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error recording watch for user {user_id}: {e}")
            return internal("Something went wrong while recording watch history")

        return Ok(None)

# Create singleton instance
user_service = UserService()
