from typing import Optional

import asyncpg

from ..core.errors import StoreError, StoreErrorKind
from ..core.metrics import ServiceMetrics
from ..models.data import RankedPage, ScoreEntry, collect_entries, decode_entries
from ..logger import get_logger
from .base import ScoreStore
from .connection import DatabaseConnection

logger = get_logger(__name__)

# Client-side rejection of an argument the column type cannot hold.
# It subclasses InterfaceError, so it is checked before UNAVAILABLE_ERRORS.
REJECTED_INPUT_ERRORS = (asyncpg.exceptions._base.DataError,)

# Raised when the server cannot be reached or the connection dropped mid-call.
# Checked before PostgresError since some of these subclass it.
UNAVAILABLE_ERRORS = (
    OSError,
    asyncpg.exceptions.InterfaceError,
    asyncpg.exceptions.PostgresConnectionError,
    asyncpg.exceptions.CannotConnectNowError,
    asyncpg.exceptions.TooManyConnectionsError,
)

INSERT_SCORE = '''
    INSERT INTO scores (user_id, username, score, level, timestamp, platform)
    VALUES ($1, $2, $3, $4, $5, $6)
    RETURNING id
'''

SELECT_TOP_N = '''
    SELECT id, user_id, username, score, level, timestamp, platform
    FROM scores
    ORDER BY score DESC, timestamp ASC, id ASC
    LIMIT $1
'''

class PostgresScoreStore(ScoreStore):
    def __init__(self, db_connection: DatabaseConnection, metrics: Optional[ServiceMetrics] = None):
        super().__init__(metrics)
        self.db = db_connection

    async def initialize(self):
        await self.db.initialize()

    async def close(self):
        await self.db.close()

    def _pool(self, operation: str):
        if self.db.pool is None:
            raise StoreError(StoreErrorKind.UNAVAILABLE, operation, "connection pool is not initialized")
        return self.db.pool

    async def _insert(self, entry: ScoreEntry) -> str:
        pool = self._pool('insert')
        try:
            async with pool.acquire() as conn:
                entry_id = await conn.fetchval(
                    INSERT_SCORE,
                    entry.user_id, entry.username, entry.score,
                    entry.level, entry.timestamp, entry.platform
                )
        except REJECTED_INPUT_ERRORS as e:
            logger.error(f"Invalid score values for user {entry.user_id}: {e}")
            raise StoreError(StoreErrorKind.REJECTED, 'insert', str(e)) from e
        except UNAVAILABLE_ERRORS as e:
            logger.error(f"Database unreachable while inserting score for user {entry.user_id}: {e}")
            raise StoreError(StoreErrorKind.UNAVAILABLE, 'insert', str(e)) from e
        except asyncpg.exceptions.PostgresError as e:
            logger.error(f"Database rejected score for user {entry.user_id}: {e}")
            raise StoreError(StoreErrorKind.REJECTED, 'insert', str(e)) from e
        return str(entry_id)

    async def _query_page(self, limit: int) -> RankedPage:
        pool = self._pool('query_top_n')
        try:
            async with pool.acquire() as conn:
                rows = await conn.fetch(SELECT_TOP_N, limit)
        except REJECTED_INPUT_ERRORS as e:
            logger.error(f"Invalid limit for top {limit} query: {e}")
            raise StoreError(StoreErrorKind.REJECTED, 'query_top_n', str(e)) from e
        except UNAVAILABLE_ERRORS as e:
            logger.error(f"Database unreachable while fetching top {limit}: {e}")
            raise StoreError(StoreErrorKind.UNAVAILABLE, 'query_top_n', str(e)) from e
        except asyncpg.exceptions.PostgresError as e:
            logger.error(f"Database rejected top {limit} query: {e}")
            raise StoreError(StoreErrorKind.REJECTED, 'query_top_n', str(e)) from e
        return collect_entries(decode_entries(rows))
