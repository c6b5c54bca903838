import asyncio
from enum import Enum
from typing import Optional


class LeaderboardError(Exception):
    """Base class for every error raised by the leaderboard core"""


class StoreErrorKind(str, Enum):
    UNAVAILABLE = 'unavailable'
    REJECTED = 'rejected'
    TIMEOUT = 'timeout'
    CANCELLED = 'cancelled'


class StoreError(LeaderboardError):
    """Infrastructure failure talking to the backing store.

    The message is for logs only; the HTTP boundary never echoes it back.
    """

    def __init__(self, kind: StoreErrorKind, operation: str, message: str = '',
                 entry_id: Optional[str] = None):
        self.kind = kind
        self.operation = operation
        self.entry_id = entry_id
        detail = f"{operation} failed ({kind.value})"
        if entry_id is not None:
            detail += f" for entry {entry_id}"
        if message:
            detail += f": {message}"
        super().__init__(detail)


class StoreCancelledError(StoreError, asyncio.CancelledError):
    """A store call aborted because the enclosing request task was cancelled.

    Also a CancelledError so the task still finishes as cancelled.
    """

    def __init__(self, operation: str, entry_id: Optional[str] = None):
        super().__init__(StoreErrorKind.CANCELLED, operation, entry_id=entry_id)


class SubmissionErrorKind(str, Enum):
    INVALID_USERNAME = 'invalid_username'
    INVALID_SCORE = 'invalid_score'
    INVALID_USER_ID = 'invalid_user_id'
    INVALID_LIMIT = 'invalid_limit'
    PERSISTENCE = 'persistence'


class SubmissionError(LeaderboardError):
    def __init__(self, kind: SubmissionErrorKind, message: str):
        self.kind = kind
        super().__init__(message)

    @property
    def is_validation(self) -> bool:
        return self.kind is not SubmissionErrorKind.PERSISTENCE


class DeserializationError(LeaderboardError):
    """A stored record could not be decoded into a ScoreEntry.

    Produced as a value while decoding ranked results, never raised out of a query.
    """

    def __init__(self, message: str, record_id: Optional[str] = None):
        self.record_id = record_id
        super().__init__(message)
