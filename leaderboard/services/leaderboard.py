"""Submission validation and ranked reads on top of a ScoreStore."""
from datetime import datetime, timezone
from typing import List, Optional

from ..core.errors import (
    StoreCancelledError,
    StoreError,
    StoreErrorKind,
    SubmissionError,
    SubmissionErrorKind,
)
from ..core.metrics import ServiceMetrics
from ..database.base import ScoreStore
from ..models.data import ScoreEntry, ScoreSubmission
from ..logger import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_LIMIT = 50


def validate_submission(candidate: ScoreSubmission) -> None:
    """Raise SubmissionError for the first rule the candidate breaks."""
    if not isinstance(candidate.username, str) or not candidate.username.strip():
        raise SubmissionError(SubmissionErrorKind.INVALID_USERNAME, "username must not be empty")
    if candidate.score < 0:
        raise SubmissionError(SubmissionErrorKind.INVALID_SCORE, "score must be zero or greater")
    if not isinstance(candidate.user_id, str) or not candidate.user_id.strip():
        raise SubmissionError(SubmissionErrorKind.INVALID_USER_ID, "user id must not be empty")


class LeaderboardService:
    def __init__(
        self,
        store: ScoreStore,
        metrics: Optional[ServiceMetrics] = None,
        max_limit: int = DEFAULT_MAX_LIMIT,
        default_limit: Optional[int] = None,
    ):
        if max_limit < 1:
            raise ValueError("max_limit must be at least 1")
        self.store = store
        self.metrics = metrics or store.metrics
        self.max_limit = max_limit
        self.default_limit = min(default_limit or max_limit, max_limit)

    async def submit_score(
        self,
        candidate: ScoreSubmission,
        now: Optional[datetime] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """
        Validate and persist one game session result.

        Any client-supplied timestamp is replaced by `now` (current UTC time
        when omitted). Not idempotent: every call appends a new record.
        """
        try:
            validate_submission(candidate)
        except SubmissionError as e:
            self.metrics.record_rejection(e.kind.value)
            raise

        entry = candidate.stamped(now or datetime.now(timezone.utc))
        try:
            entry_id = await self.store.insert(entry, timeout=timeout)
        except StoreCancelledError:
            self.metrics.record_store_error(StoreErrorKind.CANCELLED.value)
            raise
        except StoreError as e:
            self.metrics.record_store_error(e.kind.value)
            logger.error(f"Failed to persist score for user {entry.user_id}: {e}")
            raise SubmissionError(SubmissionErrorKind.PERSISTENCE, "score could not be saved") from e

        self.metrics.record_submission()
        logger.info(f"Stored score {entry.score} for user {entry.user_id} as entry {entry_id}")

    def resolve_limit(self, limit: Optional[int], max_limit: Optional[int] = None) -> int:
        ceiling = min(max_limit, self.max_limit) if max_limit else self.max_limit
        if limit is None:
            return min(self.default_limit, ceiling)
        if limit < 1:
            raise SubmissionError(SubmissionErrorKind.INVALID_LIMIT, "limit must be at least 1")
        return min(limit, ceiling)

    async def get_leaderboard(
        self,
        limit: Optional[int] = None,
        max_limit: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> List[ScoreEntry]:
        """Top entries by score; the requested limit is clamped to the configured maximum."""
        resolved = self.resolve_limit(limit, max_limit)
        self.metrics.record_query()
        try:
            return await self.store.query_top_n(resolved, timeout=timeout)
        except StoreError as e:
            self.metrics.record_store_error(e.kind.value)
            logger.error(f"Failed to fetch leaderboard (limit {resolved}): {e}")
            raise
