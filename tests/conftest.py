"""
Shared pytest fixtures.

Uses a SQLite file database so no Postgres is required for tests, and a
fake model client in place of Gemini so no test touches the network.
"""
import os

os.environ["DATABASE_URL"] = "sqlite:///./test_standupsync.db"
os.environ.pop("GEMINI_API_KEY", None)

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from standupsync.db.base import Base, get_db  # noqa: E402
from standupsync.main import app  # noqa: E402
from standupsync.models.standup import Standup  # noqa: E402
from standupsync.routers.deps import get_gateway  # noqa: E402
from standupsync.services.ai_gateway import AIAnalysisGateway, GatewayConfig  # noqa: E402

SQLITE_URL = "sqlite:///./test_standupsync.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_CONFIG = GatewayConfig(
    candidate_models=("fake-model",),
    credential="test-api-key",
    timeout_seconds=5.0,
)


class FakeModel:
    """Stands in for Gemini: returns canned text or raises, and records prompts."""

    def __init__(self, response: str = "", error: Exception | None = None,
                 model_name: str = "fake-model"):
        self.model_name = model_name
        self.response = response
        self.error = error
        self.calls: list[tuple[str, dict]] = []

    def generate(self, prompt: str, generation_config: dict) -> str:
        self.calls.append((prompt, generation_config))
        if self.error is not None:
            raise self.error
        return self.response


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.query(Standup).delete()
        db.commit()
        db.close()


@pytest.fixture()
def fake_model():
    return FakeModel()


@pytest.fixture()
def gateway(fake_model):
    return AIAnalysisGateway(TEST_CONFIG, fake_model)


@pytest.fixture()
def client(db, gateway):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gateway] = lambda: gateway
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def add_standup(db):
    """Insert a standup and commit so API requests (separate sessions) see it."""
    def _add(day, **fields) -> Standup:
        values = {
            "date": day if isinstance(day, date) else date.fromisoformat(day),
            "yesterday": "",
            "today": "",
            "blockers": "",
            "tags": [],
            "mood": 0,
            "productivity": 0,
            "is_highlight": False,
        }
        values.update(fields)
        standup = Standup(**values)
        db.add(standup)
        db.commit()
        db.refresh(standup)
        return standup
    return _add
