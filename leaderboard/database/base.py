import asyncio
from abc import ABC, abstractmethod
from typing import Awaitable, List, Optional, TypeVar

from ..core.errors import StoreCancelledError, StoreError, StoreErrorKind
from ..core.metrics import ServiceMetrics
from ..models.data import RankedPage, ScoreEntry
from ..logger import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

class ScoreStore(ABC):
    """Persistence and ranked retrieval of score entries.

    Implementations are append-only: every insert produces a new record keyed
    by a store-generated id. Ranked queries order by score descending, then
    timestamp ascending, then insertion order.
    """

    def __init__(self, metrics: Optional[ServiceMetrics] = None):
        self.metrics = metrics or ServiceMetrics()

    async def initialize(self):
        """Open connections and make sure the schema exists"""

    async def close(self):
        """Release connections"""

    async def insert(self, entry: ScoreEntry, timeout: Optional[float] = None) -> str:
        """Persist an entry and return its store-generated id"""
        return await self._guarded('insert', self._insert(entry), timeout)

    async def query_top_n(self, limit: int, timeout: Optional[float] = None) -> List[ScoreEntry]:
        """Return at most `limit` entries in rank order, skipping undecodable records"""
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")
        page = await self._guarded('query_top_n', self._query_page(limit), timeout)
        if page.skipped:
            for error in page.errors:
                logger.warning(f"Skipping malformed record {error.record_id}: {error}")
            self.metrics.record_skipped(page.skipped, 'query_top_n')
        return page.entries

    @abstractmethod
    async def _insert(self, entry: ScoreEntry) -> str:
        ...

    @abstractmethod
    async def _query_page(self, limit: int) -> RankedPage:
        ...

    async def _guarded(self, operation: str, call: Awaitable[T], timeout: Optional[float],
                       entry_id: Optional[str] = None) -> T:
        """Run a store call under the request deadline.

        Deadline expiry becomes StoreError(TIMEOUT); cancellation of the
        enclosing task becomes StoreCancelledError.
        """
        try:
            async with asyncio.timeout(timeout):
                return await call
        except TimeoutError as e:
            raise StoreError(StoreErrorKind.TIMEOUT, operation, f"no response within {timeout}s",
                             entry_id=entry_id) from e
        except StoreCancelledError:
            raise
        except asyncio.CancelledError as e:
            logger.info(f"{operation} cancelled by caller")
            raise StoreCancelledError(operation, entry_id) from e
