from datetime import datetime, timezone
from typing import Iterable, Iterator, List, Mapping, Optional, Union

from ..core.errors import DeserializationError

FIELDS = ('user_id', 'username', 'score', 'level', 'timestamp', 'platform')

class ScoreEntry:
    """One completed game session. Immutable once persisted."""
    __slots__ = FIELDS

    def __init__(self, user_id: str, username: str, score: int, level: int,
                 timestamp: datetime, platform: str):
        self.user_id = user_id
        self.username = username
        self.score = score
        self.level = level
        self.timestamp = timestamp
        self.platform = platform

    @classmethod
    def from_record(cls, record: Mapping, record_id: Optional[str] = None) -> 'ScoreEntry':
        """Decode a stored row/document, raising DeserializationError on bad data"""
        try:
            values = {name: record[name] for name in FIELDS}
        except (KeyError, TypeError) as e:
            raise DeserializationError(f"missing field {e}", record_id) from e

        for name in ('user_id', 'username'):
            value = values[name]
            if not isinstance(value, str) or not value.strip():
                raise DeserializationError(f"{name} must be a non-empty string", record_id)
        for name in ('score', 'level'):
            value = values[name]
            if isinstance(value, bool) or not isinstance(value, int):
                raise DeserializationError(f"{name} must be an integer", record_id)
        if values['score'] < 0:
            raise DeserializationError("score must be non-negative", record_id)

        timestamp = values['timestamp']
        if isinstance(timestamp, str):
            try:
                timestamp = datetime.fromisoformat(timestamp.replace('Z', '+00:00'))
            except ValueError as e:
                raise DeserializationError(f"bad timestamp {timestamp!r}", record_id) from e
        if not isinstance(timestamp, datetime):
            raise DeserializationError("timestamp must be a datetime", record_id)
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        values['timestamp'] = timestamp

        platform = values['platform']
        if platform is None:
            values['platform'] = ''
        elif not isinstance(platform, str):
            raise DeserializationError("platform must be a string", record_id)

        return cls(**values)

    def to_dict(self):
        return {name: getattr(self, name) for name in FIELDS}

    def rank_key(self):
        # Higher score first, then the earlier achiever
        return (-self.score, self.timestamp)

    def __eq__(self, other):
        if not isinstance(other, ScoreEntry):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"ScoreEntry(username={self.username!r}, score={self.score}, timestamp={self.timestamp.isoformat()})"

class ScoreSubmission:
    """Untrusted candidate entry as decoded from the request boundary"""
    __slots__ = FIELDS

    def __init__(self, user_id: str, username: str, score: int, level: int = 0,
                 platform: str = '', timestamp: Optional[datetime] = None):
        self.user_id = user_id
        self.username = username
        self.score = score
        self.level = level
        self.platform = platform
        self.timestamp = timestamp

    def stamped(self, now: datetime) -> ScoreEntry:
        return ScoreEntry(
            user_id=self.user_id,
            username=self.username,
            score=self.score,
            level=self.level,
            timestamp=now,
            platform=self.platform,
        )

DecodeResult = Union[ScoreEntry, DeserializationError]

def decode_entries(records: Iterable[Mapping], id_field: str = 'id') -> Iterator[DecodeResult]:
    """Lazily decode stored records; each failure is yielded, not raised"""
    for record in records:
        record_id = None
        try:
            raw_id = record[id_field]
            record_id = None if raw_id is None else str(raw_id)
        except (KeyError, TypeError):
            pass
        try:
            result = ScoreEntry.from_record(record, record_id)
        except DeserializationError as e:
            result = e
        yield result

class RankedPage:
    __slots__ = ('entries', 'skipped', 'errors')

    def __init__(self, entries: List[ScoreEntry], skipped: int, errors: List[DeserializationError]):
        self.entries = entries
        self.skipped = skipped
        self.errors = errors

def collect_entries(results: Iterable[DecodeResult]) -> RankedPage:
    entries = []
    errors = []
    for result in results:
        if isinstance(result, DeserializationError):
            errors.append(result)
        else:
            entries.append(result)
    return RankedPage(entries, len(errors), errors)
