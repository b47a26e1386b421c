# ============================================================================
# FILE: app/api/dependencies.py
# ============================================================================
from fastapi import Depends, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from app.db.session import get_db
from app.core.errors import ApiError
from app.core.security import TokenVerificationError, token_signer
from app.schemas.user import UserPublic
from app.services.user_service import user_service
from typing import Optional

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/users/login", auto_error=False)

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"

def _access_token(request: Request, bearer: Optional[str]) -> Optional[str]:
    """Access token from the cookie, falling back to the Authorization header"""
    return request.cookies.get(ACCESS_COOKIE) or bearer

def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> Optional[UserPublic]:
    """
    Get current authenticated user from the access token
    Returns None if no token or invalid token (allows anonymous access)
    """
    token = _access_token(request, token)
    if not token:
        return None

    try:
        payload = token_signer.decode_access_token(token)
    except TokenVerificationError:
        return None

    user_id = payload.get("sub")
    if user_id is None:
        return None

    result = user_service.resolve_identity(db, user_id)
    return result.value if result.ok else None

def require_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> UserPublic:
    """
    Require authenticated user (raises 401 if not authenticated)
    Use this dependency for protected endpoints
    """
    token = _access_token(request, token)
    if not token:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Unauthorized request")

    try:
        payload = token_signer.decode_access_token(token)
    except TokenVerificationError as e:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, str(e) or "Invalid access token")

    user_id = payload.get("sub")
    if user_id is None:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid access token")

    result = user_service.resolve_identity(db, user_id)
    if not result.ok:
        raise ApiError.from_err(result)
    return result.value
