"""
Integration tests for the HTTP surface.

Covers:
- /api/v1/submit-score (success / validation / identity / persistence failure)
- /api/v1/leaderboard (ordering, limit handling, store failure)
- /health and /metrics
"""
import asyncio

import pytest
from fastapi.testclient import TestClient

from leaderboard.core.errors import StoreCancelledError, StoreErrorKind
from leaderboard.database.memory import InMemoryScoreStore
from leaderboard.main import create_app
from leaderboard.models.score import INT32_MAX, ScoreRequest
from leaderboard.routes import leaderboard as leaderboard_routes
from leaderboard.routes import score as score_routes
from leaderboard.services import LeaderboardService
from tests.conftest import FailingStore, make_document

ADA = {"username": "Ada", "score": 120, "level": 3, "platform": "android"}


def submit(client, headers, **body):
    return client.post("/api/v1/submit-score", json=body, headers=headers)


# ---------------------------------------------------------------------------
# /api/v1/submit-score
# ---------------------------------------------------------------------------
class TestSubmitScore:
    def test_submit_then_top_one(self, client, auth_headers):
        resp = submit(client, auth_headers, **ADA)
        assert resp.status_code == 201
        assert resp.json() == {"status": "success", "message": "Score Submitted Successfully"}

        board = client.get("/api/v1/leaderboard", params={"limit": 1})
        assert board.status_code == 200
        entries = board.json()
        assert len(entries) == 1
        assert entries[0]["username"] == "Ada"
        assert entries[0]["score"] == 120
        assert entries[0]["user_id"] == "firebase-uid-ada"
        assert set(entries[0]) == {"user_id", "username", "score", "level", "timestamp", "platform"}

    def test_empty_username_rejected_and_board_unchanged(self, client, auth_headers):
        before = client.get("/api/v1/leaderboard").json()
        resp = submit(client, auth_headers, username="", score=50)
        assert resp.status_code == 400
        assert resp.json()["detail"]["error"] == "invalid_username"
        assert client.get("/api/v1/leaderboard").json() == before

    def test_negative_score_rejected(self, client, auth_headers, store):
        resp = submit(client, auth_headers, username="Ada", score=-1)
        assert resp.status_code == 400
        assert resp.json()["detail"]["error"] == "invalid_score"
        assert store.inserted == []

    def test_client_timestamp_ignored(self, client, auth_headers):
        resp = submit(client, auth_headers, timestamp="1999-01-01T00:00:00Z", **ADA)
        assert resp.status_code == 201
        entry = client.get("/api/v1/leaderboard").json()[0]
        assert not entry["timestamp"].startswith("1999")

    def test_body_user_id_cannot_override_identity(self, client, auth_headers):
        submit(client, auth_headers, user_id="someone-else", **ADA)
        entry = client.get("/api/v1/leaderboard").json()[0]
        assert entry["user_id"] == "firebase-uid-ada"

    def test_missing_identity_is_unauthorized(self, client, store):
        resp = client.post("/api/v1/submit-score", json=ADA)
        assert resp.status_code == 401
        assert store.inserted == []

    def test_non_integer_score_is_schema_error(self, client, auth_headers):
        resp = submit(client, auth_headers, username="Ada", score="lots")
        assert resp.status_code == 422

    @pytest.mark.parametrize("field,value", [
        ("score", INT32_MAX + 1),
        ("level", INT32_MAX + 1),
        ("level", -2**31 - 1),
    ])
    def test_values_outside_column_range_are_schema_errors(self, client, auth_headers, store, field, value):
        resp = submit(client, auth_headers, **{**ADA, field: value})
        assert resp.status_code == 422
        assert store.inserted == []

    def test_largest_storable_score_accepted(self, client, auth_headers):
        resp = submit(client, auth_headers, **{**ADA, "score": INT32_MAX})
        assert resp.status_code == 201

    def test_same_payload_twice_makes_two_entries(self, client, auth_headers):
        submit(client, auth_headers, **ADA)
        submit(client, auth_headers, **ADA)
        assert len(client.get("/api/v1/leaderboard").json()) == 2

    @pytest.mark.parametrize("kind,status", [
        (StoreErrorKind.UNAVAILABLE, 503),
        (StoreErrorKind.TIMEOUT, 503),
        (StoreErrorKind.REJECTED, 500),
    ])
    def test_persistence_failure_is_generic(self, settings, auth_headers, kind, status):
        with TestClient(create_app(store=FailingStore(kind), settings=settings)) as client:
            resp = submit(client, auth_headers, **ADA)
        assert resp.status_code == status
        assert "backend down" not in resp.text


# ---------------------------------------------------------------------------
# /api/v1/leaderboard
# ---------------------------------------------------------------------------
class TestLeaderboard:
    def test_sorted_by_score_descending(self, client, auth_headers):
        for name, score in [("Low", 10), ("High", 900), ("Mid", 300)]:
            submit(client, auth_headers, username=name, score=score)
        names = [e["username"] for e in client.get("/api/v1/leaderboard").json()]
        assert names == ["High", "Mid", "Low"]

    def test_limit_honored(self, client, auth_headers):
        for i in range(5):
            submit(client, auth_headers, username=f"P{i}", score=i)
        assert len(client.get("/api/v1/leaderboard", params={"limit": 2}).json()) == 2

    def test_limit_clamped_to_max(self, client, store):
        client.get("/api/v1/leaderboard", params={"limit": 1000})
        assert store.queries == [50]

    def test_zero_limit_rejected(self, client):
        resp = client.get("/api/v1/leaderboard", params={"limit": 0})
        assert resp.status_code == 400
        assert resp.json()["detail"]["error"] == "invalid_limit"

    def test_corrupt_record_skipped(self, client, auth_headers, store):
        submit(client, auth_headers, **ADA)
        store.put_document(make_document(username="Broken", score="x"))
        resp = client.get("/api/v1/leaderboard")
        assert resp.status_code == 200
        assert [e["username"] for e in resp.json()] == ["Ada"]
        assert client.get("/metrics").json()["skipped_records"] == 1

    def test_store_failure_is_generic(self, settings):
        with TestClient(create_app(store=FailingStore(StoreErrorKind.REJECTED), settings=settings)) as client:
            resp = client.get("/api/v1/leaderboard")
        assert resp.status_code == 500
        assert resp.json()["detail"] == "Failed to fetch leaderboard"


# ---------------------------------------------------------------------------
# /health, /metrics
# ---------------------------------------------------------------------------
class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"
        assert resp.json()["uptime"] >= 0

    def test_metrics_counts_activity(self, client, auth_headers):
        submit(client, auth_headers, **ADA)
        submit(client, auth_headers, username="", score=1)
        client.get("/api/v1/leaderboard")
        data = client.get("/metrics").json()
        assert data["submissions"] == 1
        assert data["rejected_submissions"] == 1
        assert data["queries"] == 1


# ---------------------------------------------------------------------------
# cancellation of in-flight requests
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
class TestRouteCancellation:
    async def _cancel_midway(self, coro):
        caught = []

        async def run():
            try:
                return await coro
            except StoreCancelledError as e:
                caught.append(e)
                raise

        task = asyncio.create_task(run())
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        return caught

    async def test_cancelled_leaderboard_request_stays_cancelled(self, settings):
        service = LeaderboardService(InMemoryScoreStore(latency=1.0))
        caught = await self._cancel_midway(
            leaderboard_routes.get_leaderboard(limit=10, service=service, settings=settings)
        )
        assert caught[0].kind is StoreErrorKind.CANCELLED
        assert service.metrics.store_errors[StoreErrorKind.CANCELLED.value] == 1

    async def test_cancelled_submission_stays_cancelled(self, settings):
        store = InMemoryScoreStore(latency=1.0)
        service = LeaderboardService(store)
        request = ScoreRequest(**ADA)
        caught = await self._cancel_midway(
            score_routes.submit_score(request, user_id="firebase-uid-ada", service=service, settings=settings)
        )
        assert caught[0].kind is StoreErrorKind.CANCELLED
        assert len(store) == 0
