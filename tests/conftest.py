"""Shared fixtures: an application and a session bound to a throwaway SQLite database."""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from mmanager.core.db import Base, build_session_factory, get_engine
from mmanager.core.settings import Settings
from mmanager.main import create_app

OWNER = "owner-1"
OWNER_HEADERS = {"X-Owner-Id": OWNER}


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a database and log file under tmp_path."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        log_file=str(tmp_path / "logs" / "test.log"),
    )


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    """A TestClient whose lifespan (table creation) has run."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def session(settings: Settings) -> Iterator[Session]:
    """A plain SQLAlchemy session for service-level tests."""
    engine = get_engine(settings)
    Base.metadata.create_all(engine)
    db = build_session_factory(engine)()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def add_category(client: TestClient) -> Callable[[str], str]:
    """Create a category through the API and return its id."""

    def _add(name: str) -> str:
        response = client.post("/categories", json={"name": name}, headers=OWNER_HEADERS)
        if response.status_code != 201:  # noqa: PLR2004
            msg = f"Could not create category {name!r}: {response.status_code} {response.text}"
            raise AssertionError(msg)
        return response.json()["id"]

    return _add
