"""Pytest configuration and fixtures."""

import os

# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL", "").startswith("postgresql"):
    SQLALCHEMY_DATABASE_URL = os.environ["DATABASE_URL"].replace("/meal_planner", "/meal_planner_test")
else:
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

# Must be set before the application settings are first read
os.environ["DATABASE_URL"] = SQLALCHEMY_DATABASE_URL
os.environ["REALTIME_ENABLED"] = "false"
os.environ.pop("STORAGE_URL", None)
os.environ.pop("STORAGE_API_KEY", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from meal_planner import models  # noqa: E402, F401
from meal_planner.api.dependencies import get_backend  # noqa: E402
from meal_planner.database import Base, get_db  # noqa: E402
from meal_planner.main import app  # noqa: E402
from meal_planner.services.local_store import LocalBackend, LocalKeyValueStore  # noqa: E402


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    if "postgresql" in SQLALCHEMY_DATABASE_URL:
        from sqlalchemy_utils import create_database, database_exists

        if not database_exists(SQLALCHEMY_DATABASE_URL):
            create_database(SQLALCHEMY_DATABASE_URL)

    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client on the database backend."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def local_backend(tmp_path):
    """Local fallback backend writing into a temporary directory."""
    return LocalBackend(LocalKeyValueStore(tmp_path / "store", quota_bytes=64 * 1024))


@pytest.fixture(scope="function")
def local_client(local_backend):
    """Create a test client running without a configured database."""
    app.dependency_overrides[get_backend] = lambda: local_backend
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    email = "test@example.com"
    response = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": "testpass123", "name": "Test User"},
    )
    assert response.status_code == 201
    data = response.json()
    token = data["access_token"]
    user_id = data["user"]["id"]

    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=user_id, email=email)


def recipe_payload(name: str, ingredients: list[dict], **overrides) -> dict:
    """Minimal valid recipe body."""
    payload = {
        "name": name,
        "description": f"{name} for testing",
        "cook_time": 20,
        "servings": 2,
        "difficulty": "easy",
        "ingredients": ingredients,
        "instructions": ["Cook it"],
        "tags": [],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def create_recipe(client, auth_headers):
    """Factory creating a recipe through the API and returning its JSON."""

    def _create(name: str, ingredients: list[dict], **overrides) -> dict:
        response = client.post(
            "/api/v1/recipes",
            headers=auth_headers,
            json=recipe_payload(name, ingredients, **overrides),
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create
