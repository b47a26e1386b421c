# ============================================================================
# FILE: app/main.py
# ============================================================================
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.api.v1.router import api_router
from app.core.errors import ApiError, api_error_handler
from app.core.logging import setup_logging
from app.config import settings
import logging

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Create FastAPI app instance
app = FastAPI(
    title="Tube Identity API",
    description="Accounts, sessions and channel graph for a media-sharing platform",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ApiError, api_error_handler)

# Include API v1 router
app.include_router(api_router, prefix="/api/v1")

@app.on_event("startup")
async def startup_event():
    """Initialize services on startup"""
    logger.info(f"Starting {settings.APP_NAME}")
    # Create database tables if missing
    from app.db.base import Base, import_models
    from app.db.session import engine
    import_models()
    Base.metadata.create_all(bind=engine)

@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info(f"Shutting down {settings.APP_NAME}")

@app.get("/health")
async def health_check():
    return {"status": "healthy"}
