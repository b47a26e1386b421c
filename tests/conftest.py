# ============================================================================
# FILE: tests/conftest.py
# ============================================================================
import os
import tempfile

# Settings are read at import time, so the environment goes first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ["COOKIE_SECURE"] = "false"
os.environ["MEDIA_UPLOAD_URL"] = ""
os.environ["TEMP_UPLOAD_DIR"] = tempfile.mkdtemp(prefix="tube-identity-")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.cache import RedisCache
from app.core.media import discard_staged
from app.db.base import Base, import_models
from app.db.models.subscription import Subscription
from app.db.models.user import User
from app.db.models.video import Video
from app.db.session import get_db
from app.schemas.user import UserRegister
from app.services.user_service import UserService, user_service


class FakeUploader:
    """Stands in for the remote media store"""

    def __init__(self):
        self.uploaded = []
        self.fail_for = set()

    async def upload(self, local_path):
        if not local_path:
            return None
        name = os.path.basename(local_path)
        discard_staged(local_path)
        if name in self.fail_for:
            return None
        url = f"https://media.test/{name}"
        self.uploaded.append(url)
        return {"url": url}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    import_models()
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def service(uploader):
    return UserService(uploader=uploader, profile_cache=RedisCache(url=""))


@pytest.fixture
def stage(tmp_path):
    """Write a throwaway file standing in for a staged upload"""
    def _stage(name):
        path = tmp_path / name
        path.write_bytes(b"image-bytes")
        return str(path)
    return _stage


@pytest.fixture
def make_user(db, service, stage):
    """Register a user through the service and return the ORM row"""
    async def _make_user(username, email=None, password="secret123", fullname=None):
        data = UserRegister(
            fullname=fullname or username.title(),
            email=email or f"{username}@mail.test",
            username=username,
            password=password,
        )
        result = await service.register(db, data, stage(f"{username}-avatar.png"))
        assert result.ok, result
        return db.query(User).filter(User.id == result.value.id).first()
    return _make_user


@pytest.fixture
def subscribe(db):
    def _subscribe(subscriber, channel):
        db.add(Subscription(subscriber_id=subscriber.id, channel_id=channel.id))
        db.commit()
    return _subscribe


@pytest.fixture
def make_video(db):
    def _make_video(owner, title="A video"):
        video = Video(
            video_file=f"https://media.test/{title}.mp4",
            thumbnail=f"https://media.test/{title}.jpg",
            title=title,
            description=f"About {title}",
            duration=12.5,
            owner_id=owner.id,
        )
        db.add(video)
        db.commit()
        return video
    return _make_video


@pytest.fixture
def client(session_factory, uploader, monkeypatch):
    from app.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(user_service, "uploader", uploader)
    yield TestClient(app)
    app.dependency_overrides.clear()
