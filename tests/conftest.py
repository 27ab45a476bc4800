"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import sitecms.models  # noqa: F401
from sitecms.database import Base, get_db
from sitecms.dependencies import get_media_store, get_notifier
from sitecms.models.user import User
from sitecms.services.auth import AuthService
from sitecms.services.media import MediaStore, StoredMedia, build_object_key
from sitecms.services.notifier import Notifier


class FakeMediaStore(MediaStore):
    """In-memory media store recording every upload and delete."""

    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}
        self.uploads: list[str] = []
        self.deletes: list[str] = []
        self.fail_folders: set[str] = set()
        self.fail_deletes = False

    def upload(self, data: bytes, folder: str, filename: str, content_type: str | None = None) -> StoredMedia:
        if folder in self.fail_folders:
            raise ConnectionError(f"upload to {folder} refused")
        key = build_object_key(folder, filename)
        self.blobs[key] = data
        self.uploads.append(key)
        return StoredMedia(url=f"https://media.test/{key}", key=key)

    def delete(self, key: str) -> None:
        if self.fail_deletes:
            raise ConnectionError("delete refused")
        self.deletes.append(key)
        self.blobs.pop(key, None)


class RecordingNotifier(Notifier):
    """Keeps sent messages instead of delivering them."""

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.fail = False

    async def send(self, recipient: str, subject: str, text: str, html: str | None = None) -> None:
        if self.fail:
            raise ConnectionError("SMTP unavailable")
        self.sent.append({"recipient": recipient, "subject": subject, "text": text, "html": html})


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="media_store")
def media_store_fixture() -> FakeMediaStore:
    return FakeMediaStore()


@pytest.fixture(name="notifier")
def notifier_fixture() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture(name="client")
def client_fixture(db_session: Session, media_store: FakeMediaStore, notifier: RecordingNotifier):
    """Create a test client with overridden collaborators and disabled rate limiting."""
    from main import app
    from sitecms.rate_limit import limiter

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_media_store] = lambda: media_store
    app.dependency_overrides[get_notifier] = lambda: notifier
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


def _make_user(db_session: Session, notifier: Notifier, name: str, email: str, role: str) -> dict:
    from sitecms.services.jwt import get_jwt_service

    result = AuthService(notifier).register(db_session, name, email, "password123")
    if role != "user":
        db_session.get(User, result.user_id).role = role
        db_session.commit()

    token = get_jwt_service().create_token(user_id=result.user_id, email=result.email, role=role)
    return {
        "user_id": result.user_id,
        "email": result.email,
        "name": result.name,
        "token": token,
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session, notifier: RecordingNotifier) -> dict:
    """A regular user with a valid token."""
    return _make_user(db_session, notifier, "Test User", "test@example.com", "user")


@pytest.fixture(name="admin")
def admin_fixture(db_session: Session, notifier: RecordingNotifier) -> dict:
    """An admin user with a valid token."""
    return _make_user(db_session, notifier, "Admin", "admin@example.com", "admin")
