"""Pytest fixtures for async FastAPI testing.

Points the settings at a throwaway SQLite file before any application module
is imported, initializes a clean schema for the session, and provides an
httpx `AsyncClient` bound to the app plus small factories for users and
tokens.
"""
import os
import pathlib
import tempfile
import uuid

import pytest

_TMP_DIR = pathlib.Path(tempfile.mkdtemp(prefix="coachdesk-tests-"))

os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP_DIR / 'test.db'}")
os.environ.setdefault("JWT_ACCESS_SECRET", "test-access-secret-0123456789abcdef0123")
os.environ.setdefault("JWT_REFRESH_SECRET", "test-refresh-secret-fedcba9876543210fedc")
os.environ.setdefault("ALGORITHM", "HS256")
# cheap argon2 parameters keep the suite fast
os.environ.setdefault("PASSWORD_HASH_TIME_COST", "1")
os.environ.setdefault("PASSWORD_HASH_MEMORY_COST", "1024")
os.environ.setdefault("BACKEND_CORS_ORIGINS", "")


DEFAULT_PASSWORD = "StrongPassw0rd!"


@pytest.fixture(scope="session")
def prepare_database():
    """Create clean schema for the test session."""
    from coachdesk.core.database import engine, Base

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    yield

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(prepare_database):
    """Yield a SQLAlchemy session for direct DB access in tests."""
    from coachdesk.core.database import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_user(db_session):
    """Factory creating a user straight in the database."""
    from coachdesk.core.constants import UserRole
    from coachdesk.core.security import hash_password
    from coachdesk.models.user import User

    def _make_user(role=UserRole.CLIENT, active=True, password=DEFAULT_PASSWORD, email=None, name="Test User"):
        user = User(
            email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
            name=name,
            password_hash=hash_password(password),
            role=role,
            active=active,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    """Build an Authorization header with a fresh access token for a user."""
    from coachdesk.core.security import create_access_token

    def _headers(user) -> dict:
        token, _ = create_access_token(user_id=user.id, email=user.email, role=user.role)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def password():
    return DEFAULT_PASSWORD


@pytest.fixture
async def async_client(prepare_database):
    """Provide an httpx AsyncClient configured with the FastAPI app."""
    from httpx import ASGITransport, AsyncClient
    from coachdesk.main import create_app

    app = create_app()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
