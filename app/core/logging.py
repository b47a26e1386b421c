# ============================================================================
# FILE: app/core/logging.py
# ============================================================================
import logging
import sys
from app.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False

def setup_logging(level: str = None) -> None:
    """Configure root logging once for the whole process"""
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())
    root.addHandler(handler)

    # SQL echo is noisy outside debug mode
    if not settings.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    _configured = True
