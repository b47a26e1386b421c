# ============================================================================
# FILE: app/db/base.py
# ============================================================================
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import models so Base.metadata knows every table before create_all()
def import_models():
    from app.db.models import user, subscription, video, history  # noqa: F401
