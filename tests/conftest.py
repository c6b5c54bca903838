"""
Shared pytest fixtures for the leaderboard test suite.

Strategy:
- Model and service tests: in-memory store, no network.
- PostgreSQL store tests: a fake asyncpg pool standing in for the server.
- Route tests: FastAPI TestClient over an app wired to an in-memory store.
"""
import os
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

# Never reach for a real database while importing the app module
os.environ["STORE_BACKEND"] = "memory"

from leaderboard.config import LeaderboardConfig
from leaderboard.core.errors import StoreError, StoreErrorKind
from leaderboard.core.metrics import ServiceMetrics
from leaderboard.database.base import ScoreStore
from leaderboard.database.memory import InMemoryScoreStore
from leaderboard.main import create_app
from leaderboard.models.data import ScoreEntry, ScoreSubmission
from leaderboard.services import LeaderboardService

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def make_entry(username="Ada", score=100, seconds=0, **kwargs) -> ScoreEntry:
    defaults = {
        "user_id": f"uid-{username.lower() or 'anon'}",
        "level": 1,
        "platform": "android",
        "timestamp": BASE_TIME + timedelta(seconds=seconds),
    }
    defaults.update(kwargs)
    return ScoreEntry(username=username, score=score, **defaults)


def make_submission(username="Ada", score=100, **kwargs) -> ScoreSubmission:
    defaults = {"user_id": "uid-ada", "level": 3, "platform": "android"}
    defaults.update(kwargs)
    return ScoreSubmission(username=username, score=score, **defaults)


def make_document(**overrides) -> dict:
    document = make_entry().to_dict()
    document.update(overrides)
    return document


class RecordingStore(InMemoryScoreStore):
    """In-memory store that remembers every entry handed to insert()."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.inserted = []
        self.queries = []

    async def _insert(self, entry):
        self.inserted.append(entry)
        return await super()._insert(entry)

    async def _query_page(self, limit):
        self.queries.append(limit)
        return await super()._query_page(limit)


class FailingStore(ScoreStore):
    """Store whose every call fails with the given StoreError kind."""

    def __init__(self, kind=StoreErrorKind.UNAVAILABLE):
        super().__init__()
        self.kind = kind

    async def _insert(self, entry):
        raise StoreError(self.kind, "insert", "backend down")

    async def _query_page(self, limit):
        raise StoreError(self.kind, "query_top_n", "backend down")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def metrics():
    return ServiceMetrics()


@pytest.fixture
def store(metrics):
    return RecordingStore(metrics=metrics)


@pytest.fixture
def service(store):
    return LeaderboardService(store, max_limit=50)


@pytest.fixture
def settings():
    return LeaderboardConfig(store_backend="memory", max_limit=50, default_limit=50, request_timeout=2.0)


@pytest.fixture
def app(store, settings):
    return create_app(store=store, settings=settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    return {"X-User-ID": "firebase-uid-ada"}
