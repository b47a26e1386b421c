# ============================================================================
# FILE: app/core/security.py
# Password hashing and JWT signing helpers
# ============================================================================
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from app.config import settings
import uuid

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """Hash a plaintext password"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plaintext password against a stored hash"""
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Unrecognised or malformed hash
        return False


class TokenVerificationError(Exception):
    """Raised when a token fails signature, expiry or format checks"""


class TokenSigner:
    """Signs and verifies time-bounded JWTs"""

    def __init__(self, algorithm: str = None):
        self.algorithm = algorithm or settings.ALGORITHM

    def sign(self, claims: Dict[str, Any], secret: str, expires_delta: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = dict(claims)
        payload["iat"] = now
        payload["exp"] = now + expires_delta
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def verify(self, token: str, secret: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise TokenVerificationError("Token has expired") from e
        except JWTError as e:
            raise TokenVerificationError(str(e) or "Invalid token") from e

    def create_access_token(self, user) -> str:
        """Short-lived token carrying the identity claims"""
        claims = {
            "sub": user.id,
            "username": user.username,
            "email": user.email,
            "fullname": user.fullname,
            "type": "access",
        }
        return self.sign(
            claims,
            settings.ACCESS_TOKEN_SECRET,
            timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )

    def create_refresh_token(self, user) -> str:
        """Long-lived token carrying only the subject id"""
        claims = {
            "sub": user.id,
            "type": "refresh",
            # Two refresh tokens issued within the same second must still differ
            "jti": uuid.uuid4().hex,
        }
        return self.sign(
            claims,
            settings.REFRESH_TOKEN_SECRET,
            timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        )

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        payload = self.verify(token, settings.ACCESS_TOKEN_SECRET)
        if payload.get("type") != "access":
            raise TokenVerificationError("Not an access token")
        return payload

    def decode_refresh_token(self, token: str) -> Dict[str, Any]:
        payload = self.verify(token, settings.REFRESH_TOKEN_SECRET)
        if payload.get("type") != "refresh":
            raise TokenVerificationError("Not a refresh token")
        return payload


# Create singleton instance
token_signer = TokenSigner()
