# ============================================================================
# FILE: app/api/v1/endpoints/user.py
# ============================================================================
from fastapi import APIRouter, Body, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.api.dependencies import (
    ACCESS_COOKIE, REFRESH_COOKIE, get_current_user, require_current_user,
)
from app.config import settings
from app.core.errors import unwrap_or_raise
from app.core.media import stage_upload
from app.schemas.response import api_response
from app.schemas.user import (
    PasswordChange, ProfileUpdate, RefreshRequest, UserLogin, UserPublic, UserRegister,
)
from app.services.channel_service import channel_service
from app.services.user_service import user_service
from typing import Optional
import logging

logger = logging.getLogger(__name__)
router = APIRouter()

def _with_session_cookies(content: dict, access_token: str, refresh_token: str) -> JSONResponse:
    response = JSONResponse(content=content)
    options = {"httponly": True, "secure": settings.COOKIE_SECURE}
    response.set_cookie(ACCESS_COOKIE, access_token, **options)
    response.set_cookie(REFRESH_COOKIE, refresh_token, **options)
    return response

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    fullname: str = Form(""),
    email: str = Form(""),
    username: str = Form(""),
    password: str = Form(""),
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    db: Session = Depends(get_db)
):
    """
    Register a new user account
    Avatar is required, cover image is optional
    """
    avatar_path = stage_upload(avatar)
    cover_path = stage_upload(cover_image)

    data = UserRegister(fullname=fullname, email=email, username=username, password=password)
    user = unwrap_or_raise(await user_service.register(db, data, avatar_path, cover_path))
    return api_response(user, "User registered successfully", status.HTTP_201_CREATED)

@router.post("/login")
async def login(
    credentials: UserLogin,
    db: Session = Depends(get_db)
):
    """
    Login with username or email and password
    Returns both tokens and sets them as cookies
    """
    result = unwrap_or_raise(user_service.login(db, credentials))
    return _with_session_cookies(
        api_response(result, "User logged in successfully"),
        result.access_token,
        result.refresh_token,
    )

@router.post("/logout")
async def logout(
    db: Session = Depends(get_db),
    current_user: UserPublic = Depends(require_current_user)
):
    unwrap_or_raise(user_service.logout(db, current_user.id))
    response = JSONResponse(content=api_response({}, "User logged out successfully"))
    options = {"httponly": True, "secure": settings.COOKIE_SECURE}
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)
    return response

@router.post("/refresh-token")
async def refresh_access_token(
    request: Request,
    payload: Optional[RefreshRequest] = Body(None),
    db: Session = Depends(get_db)
):
    """
    Rotate the refresh token
    The token may come from the refreshToken cookie or the request body
    """
    presented = request.cookies.get(REFRESH_COOKIE) or (payload.refresh_token if payload else None)
    tokens = unwrap_or_raise(user_service.refresh_access_token(db, presented))
    return _with_session_cookies(
        api_response(tokens, "Access token refreshed"),
        tokens.access_token,
        tokens.refresh_token,
    )

@router.post("/change-password")
async def change_password(
    data: PasswordChange,
    db: Session = Depends(get_db),
    current_user: UserPublic = Depends(require_current_user)
):
    unwrap_or_raise(user_service.change_password(db, current_user.id, data))
    return api_response({}, "Password changed successfully")

@router.get("/current-user")
async def get_current_user_info(
    current_user: UserPublic = Depends(require_current_user)
):
    """
    Get current user information
    Requires authentication
    """
    user = unwrap_or_raise(user_service.get_current_user(current_user))
    return api_response(user, "Current user fetched successfully")

@router.patch("/update-account")
async def update_account(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: UserPublic = Depends(require_current_user)
):
    user = unwrap_or_raise(user_service.update_profile(db, current_user.id, data))
    return api_response(user, "Account details updated successfully")

@router.patch("/avatar")
async def update_avatar(
    avatar: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: UserPublic = Depends(require_current_user)
):
    user = unwrap_or_raise(await user_service.update_avatar(db, current_user.id, stage_upload(avatar)))
    return api_response(user, "Avatar updated successfully")

@router.patch("/cover-image")
async def update_cover_image(
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    db: Session = Depends(get_db),
    current_user: UserPublic = Depends(require_current_user)
):
    user = unwrap_or_raise(await user_service.update_cover_image(db, current_user.id, stage_upload(cover_image)))
    return api_response(user, "Cover image updated successfully")

@router.get("/c/{username}")
async def get_channel_profile(
    username: str,
    db: Session = Depends(get_db),
    current_user: Optional[UserPublic] = Depends(get_current_user)
):
    """
    Get a channel page with subscriber figures
    Anonymous viewers are never subscribed
    """
    viewer_id = current_user.id if current_user else None
    channel = unwrap_or_raise(channel_service.get_channel_profile(db, username, viewer_id))
    return api_response(channel, "Channel fetched successfully")

@router.get("/history")
async def get_watch_history(
    db: Session = Depends(get_db),
    current_user: UserPublic = Depends(require_current_user)
):
    """
    Get user's watch history, oldest first
    Requires authentication
    """
    history = unwrap_or_raise(channel_service.get_watch_history(db, current_user.id))
    return api_response(history, "Watch history fetched successfully")
