"""Shared fixtures: an in-memory database per test and authenticated clients."""
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, create_engine
from sqlmodel.pool import StaticPool

from taskboard.database import get_db
from taskboard.main import app
from taskboard.models import TaskStatus
from taskboard.schemas.task import Task


@pytest.fixture(name="engine")
def engine_fixture():
    """Create a fresh in-memory database for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="session_factory")
def session_factory_fixture(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(name="client")
def client_fixture(session_factory):
    """Create a test client with overridden database session."""
    def get_db_override():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = get_db_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def sign_up(client: TestClient, email: str, password: str = "secret-pass") -> dict:
    """Register a user and return bearer headers for them."""
    response = client.post("/api/auth/signup", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    # Requests in tests authenticate with explicit headers only
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture()
def alice(client):
    return sign_up(client, "alice@example.com")


@pytest.fixture()
def bob(client):
    return sign_up(client, "bob@example.com")


def make_task(task_id: str, status: TaskStatus, order: int, title: str = "") -> Task:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return Task(
        id=task_id,
        title=title or task_id,
        status=status,
        order=order,
        created_at=now,
        updated_at=now,
        user_id="user-1",
    )
