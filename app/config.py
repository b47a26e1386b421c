# ============================================================================
# FILE: app/config.py
# ============================================================================
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """Application configuration using Pydantic BaseSettings"""

    # App settings
    APP_NAME: str = "Tube Identity"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./tube_identity.db"  # Change to PostgreSQL in production

    # Redis cache (empty string disables caching)
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_EXPIRE_SECONDS: int = 3600

    # Security
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_SECRET: str = "access-secret-change-this-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_SECRET: str = "refresh-secret-change-this-in-production"
    REFRESH_TOKEN_EXPIRE_DAYS: int = 10
    COOKIE_SECURE: bool = True

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Media upload (Cloudinary-style unsigned upload endpoint)
    MEDIA_UPLOAD_URL: str = ""
    MEDIA_UPLOAD_PRESET: str = ""
    MEDIA_UPLOAD_API_KEY: str = ""
    MEDIA_UPLOAD_TIMEOUT_SECONDS: float = 30.0
    TEMP_UPLOAD_DIR: str = "./public/temp"

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
