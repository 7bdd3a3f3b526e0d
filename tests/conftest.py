"""Pytest configuration and fixtures."""

import io
from urllib.parse import urlsplit

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.database import Base, get_db
from app.dependencies import get_notifier
from app.models.user import User
from app.services.auth import hash_password
from app.services.notifications import email_hash
from app.services.signed_url import get_signed_url_service
from app.services.storage import LocalStorage, get_storage
from app.services.tokens import TokenService


class RecordingNotifier:
    """Notifier double that records which users were notified."""

    def __init__(self) -> None:
        self.registered_users: list[int] = []
        self.verification_sent: list[int] = []
        self.verified_users: list[int] = []

    def registered(self, user: User) -> None:
        self.registered_users.append(user.id)

    def send_email_verification(self, user: User) -> None:
        self.verification_sent.append(user.id)

    def verified(self, user: User) -> None:
        self.verified_users.append(user.id)


def make_image(width: int = 150, height: int = 150, image_format: str = "JPEG") -> bytes:
    """Encode a solid-colour test image."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), (200, 30, 30)).save(buffer, image_format)
    return buffer.getvalue()


def signed_verify_path(user_id: int, hash_value: str, expire_minutes: int | None = None) -> str:
    """Signed verification link as a path + query string for the test client."""
    url = get_signed_url_service().sign(f"/email/verify/{user_id}/{hash_value}", expire_minutes)
    parts = urlsplit(url)
    return f"{parts.path}?{parts.query}"


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


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


@pytest.fixture(name="notifier")
def notifier_fixture() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture(name="storage")
def storage_fixture(tmp_path) -> LocalStorage:
    """Public storage disk rooted in a temporary directory."""
    return LocalStorage(tmp_path / "public", "http://testserver/storage")


@pytest.fixture(name="client")
def client_fixture(db_session: Session, notifier: RecordingNotifier, storage: LocalStorage):
    """Create a test client with overridden DB, notifier and storage, and rate limiting disabled."""
    from app.rate_limit import limiter
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_storage] = lambda: storage
    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True
    app.dependency_overrides.clear()


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session):
    """Create an unverified user and return its data with a bearer token."""
    user = User(username="test_user", email="test@example.com", password=hash_password("password123"))
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)

    issued = TokenService(expire_minutes=480).create_token(db_session, user)

    return {
        "user_id": user.id,
        "username": user.username,
        "email": user.email,
        "password": "password123",
        "hash": email_hash(user.email),
        "token": issued.plain_text,
    }
