"""Pytest configuration and fixtures."""

import os
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.database import Base, get_db
from src.main import app
from src.models.enums import UserRole
from src.models.puzzle import Puzzle
from src.models.user import User
from src.services.auth import create_access_token, get_password_hash


class AuthHeaders(dict):
    """Dict subclass that also stores user_id and email."""

    def __init__(self, *args, user_id: int | None = None, email: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email


# Use test database - PostgreSQL in Docker, SQLite locally
if os.getenv("DATABASE_URL"):
    # Running in Docker - use PostgreSQL test database
    SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL").replace("/jigsaw", "/jigsaw_test")
else:
    # Running locally - use SQLite
    SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

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
    """Create a test client with database override."""

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
def auth_headers(client):
    """Register a free user and return auth headers with user info."""
    response = client.post(
        "/api/v1/auth/register",
        json={"email": "player@example.com", "password": "testpass123", "name": "Player"},
    )
    assert response.status_code == 201
    data = response.json()
    token = data["access_token"]

    return AuthHeaders(
        {"Authorization": f"Bearer {token}"},
        user_id=data["user"]["id"],
        email="player@example.com",
    )


@pytest.fixture
def pro_headers(client, auth_headers):
    """Auth headers for the same user after upgrading to pro."""
    response = client.post(
        "/api/v1/subscription/sync",
        headers=auth_headers,
        json={"revenuecat_id": "rc_player", "is_pro": True},
    )
    assert response.status_code == 200
    return auth_headers


@pytest.fixture
def admin_headers(db):
    """Create an admin user directly and return auth headers."""
    admin = User(
        email="admin@example.com",
        password_hash=get_password_hash("adminpass123"),
        name="Admin",
        role=UserRole.ADMIN.value,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    token = create_access_token(admin.id, admin.email)
    return AuthHeaders({"Authorization": f"Bearer {token}"}, user_id=admin.id, email=admin.email)


@pytest.fixture
def user(db):
    """A free-tier user created directly in the database."""
    user = User(email="direct@example.com", password_hash=get_password_hash("secret123"))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def make_puzzle(db):
    """Factory for puzzles stored directly in the database."""

    def _make_puzzle(level_order: int, rows: int = 3, cols: int = 3, is_active: bool = True):
        puzzle = Puzzle(
            title=f"Level {level_order}",
            image_url=f"https://assets.example.com/level-{level_order}.jpg",
            image_key=f"level-{level_order}.jpg",
            grid_rows=rows,
            grid_cols=cols,
            level_order=level_order,
            is_active=is_active,
        )
        db.add(puzzle)
        db.commit()
        db.refresh(puzzle)
        return puzzle

    return _make_puzzle


class FakeClock:
    """Settable clock returning aware UTC datetimes."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    """A fixed clock at mid-morning UTC."""
    return FakeClock(datetime(2026, 10, 17, 9, 30, tzinfo=UTC))
