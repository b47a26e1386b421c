# ============================================================================
# FILE: app/schemas/user.py
# ============================================================================
from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class UserRegister(BaseModel):
    """Schema for user registration (files travel separately)"""
    fullname: str = ""
    email: str = ""
    username: str = ""
    password: str = ""

class UserLogin(BaseModel):
    """Schema for user login; either username or email identifies the user"""
    username: Optional[str] = None
    email: Optional[str] = None
    password: str = ""

class UserPublic(BaseModel):
    """Public projection of a user: never carries credentials"""
    id: str
    username: str
    email: str
    fullname: str
    avatar: str
    cover_image: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class TokenPair(BaseModel):
    """Freshly issued access/refresh pair"""
    access_token: str
    refresh_token: str

class LoginResult(TokenPair):
    """Login payload: the caller's projection plus both tokens"""
    user: UserPublic

class RefreshRequest(BaseModel):
    refresh_token: Optional[str] = None

class PasswordChange(BaseModel):
    old_password: str = ""
    new_password: str = ""

class ProfileUpdate(BaseModel):
    """Schema for account details update; at least one field required"""
    fullname: Optional[str] = None
    email: Optional[str] = None
