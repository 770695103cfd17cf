import os
import tempfile
import uuid

# Settings are read at import time; configure them before importing the app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-jwt-secret"
os.environ["ENCRYPTION_KEY"] = "test-encryption-secret"
os.environ["HMAC_KEY"] = "test-hmac-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="stand-uploads-")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from app.database import Database
from app.main import create_app
from app.services.user_service import user_service
from app.utils.security import create_access_token


@pytest.fixture
def database():
    """Fresh in-memory SQLite database with the schema created."""
    database = Database(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    database.init_schema()
    yield database
    database.close()


@pytest.fixture
def db(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def client(database):
    """TestClient bound to an app that uses the test database."""
    with TestClient(create_app(database)) as test_client:
        yield test_client


@pytest.fixture
def create_user(db):
    """
    Factory fixture creating users through the identity store.
    Returns (user_id, email, password).
    """

    def _create_user(role: str = "owner", email: str | None = None,
                     password: str | None = "secret123", name: str = "Test User"):
        email = email or f"{role}-{uuid.uuid4().hex[:6]}@stand.pt"
        user_id = user_service.create_user(db, name, email, password, role)
        return user_id, email, password

    return _create_user


@pytest.fixture
def auth_headers(create_user):
    """Factory returning (headers, user_id) for a fresh user with the given role."""

    def _auth_headers(role: str = "owner"):
        user_id, _, _ = create_user(role=role)
        token = create_access_token(user_id, role)
        return {"Authorization": f"Bearer {token}"}, user_id

    return _auth_headers
