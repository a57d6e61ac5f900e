from typing import Dict, Generator

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from moviecatalog.core.config import Settings
from moviecatalog.database import build_engine, init_db
from moviecatalog.main import create_app
from moviecatalog.services import user_service

TEST_SECRET = "test-secret-key-for-the-movie-catalog-suite"

INCEPTION = {
    "title": "Inception",
    "kind": "Movie",
    "director": "Christopher Nolan",
    "budget": "$160M",
    "location": "LA, Paris",
    "duration": "148 min",
    "time_period": "2010",
}


@pytest.fixture
def settings() -> Settings:
    """
    Settings for an in-memory database; never reads a local .env file.
    """
    return Settings(
        _env_file=None,
        SECRET_KEY=TEST_SECRET,
        DATABASE_URL="sqlite://",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def engine(settings):
    engine = build_engine(settings)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def alice(db, settings):
    return user_service.create_user(db, "alice", "alice@example.com", "secret123", settings)


@pytest.fixture
def bob(db, settings):
    return user_service.create_user(db, "bob", "bob@example.com", "hunter22", settings)


@pytest.fixture
def client(settings) -> Generator[TestClient, None, None]:
    """
    In-process TestClient; the context manager runs startup so tables exist.
    """
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


def register(client: TestClient, username: str, email: str, password: str = "secret123"):
    return client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )


def auth_headers(client: TestClient, username: str, email: str, password: str = "secret123") -> Dict[str, str]:
    resp = register(client, username, email, password)
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def movie(**overrides) -> Dict[str, object]:
    data = dict(INCEPTION)
    data.update(overrides)
    return data
