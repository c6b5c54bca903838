import asyncpg
import asyncio
from ..config import DatabaseConfig, database
from ..logger import get_logger

logger = get_logger(__name__)

SCHEMA = (
    '''
    CREATE TABLE IF NOT EXISTS scores (
        id BIGSERIAL PRIMARY KEY,
        user_id VARCHAR(128) NOT NULL,
        username VARCHAR(64) NOT NULL,
        score INTEGER NOT NULL,
        level INTEGER NOT NULL DEFAULT 0,
        timestamp TIMESTAMPTZ NOT NULL,
        platform VARCHAR(32) NOT NULL DEFAULT ''
    )
    ''',
    '''
    CREATE INDEX IF NOT EXISTS idx_scores_rank
    ON scores(score DESC, timestamp ASC, id ASC)
    ''',
)

class DatabaseConnection:
    """Owns the asyncpg pool shared by every request for the process lifetime"""

    def __init__(self, config: DatabaseConfig = database):
        self.config = config
        self.pool = None
        self._initialized = False
        self._init_lock = asyncio.Lock()

    async def initialize(self):
        """Create the pool and the scores table"""
        if self._initialized:
            return

        async with self._init_lock:
            if self._initialized:  # Double check after acquiring lock
                return

            try:
                self.pool = await asyncpg.create_pool(
                    host=self.config.HOST,
                    port=self.config.PORT,
                    database=self.config.DB,
                    user=self.config.USER,
                    password=self.config.PASSWORD,
                    min_size=self.config.MIN_POOL_SIZE,
                    max_size=self.config.MAX_POOL_SIZE,
                    command_timeout=self.config.COMMAND_TIMEOUT,
                    max_inactive_connection_lifetime=300.0,
                    setup=self._setup_connection
                )

                async with self.pool.acquire() as conn:
                    for statement in SCHEMA:
                        await conn.execute(statement)

                self._initialized = True
                logger.info(f"Database connection initialized ({self.config.HOST}:{self.config.PORT}/{self.config.DB})")
            except Exception as e:
                logger.error(f"Failed to initialize database connection: {e}")
                await self.close()
                raise

    async def _setup_connection(self, connection):
        """Setup connection with proper settings"""
        await connection.execute('SET statement_timeout = 30000')
        await connection.execute('SET idle_in_transaction_session_timeout = 30000')
        await connection.execute("SET TIME ZONE 'UTC'")

    async def close(self):
        """Close database connections"""
        if self.pool:
            await self.pool.close()
            self.pool = None
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized
