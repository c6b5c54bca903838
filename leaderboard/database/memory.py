"""Process-local document store.

Used when STORE_BACKEND=memory (local development) and by the test suite.
Documents are plain dicts keyed by a generated id, the same logical layout the
PostgreSQL table uses.
"""
import asyncio
import uuid
from typing import Dict, Optional

from ..core.errors import StoreError, StoreErrorKind
from ..core.metrics import ServiceMetrics
from ..models.data import RankedPage, ScoreEntry, collect_entries, decode_entries
from .base import ScoreStore


class InMemoryScoreStore(ScoreStore):
    def __init__(self, metrics: Optional[ServiceMetrics] = None, latency: float = 0.0):
        super().__init__(metrics)
        self.latency = latency
        self.available = True
        self._documents: Dict[str, dict] = {}

    def __len__(self):
        return len(self._documents)

    async def close(self):
        self._documents.clear()

    def put_document(self, document: dict) -> str:
        """Store a raw document as-is, e.g. when importing an export"""
        entry_id = uuid.uuid4().hex
        self._documents[entry_id] = dict(document, id=entry_id)
        return entry_id

    async def _roundtrip(self, operation: str):
        if self.latency:
            await asyncio.sleep(self.latency)
        if not self.available:
            raise StoreError(StoreErrorKind.UNAVAILABLE, operation, "memory store marked unavailable")

    async def _insert(self, entry: ScoreEntry) -> str:
        await self._roundtrip('insert')
        return self.put_document(entry.to_dict())

    async def _query_page(self, limit: int) -> RankedPage:
        await self._roundtrip('query_top_n')
        # dicts keep insertion order and sort() is stable, so equal keys stay
        # in insertion order
        page = collect_entries(decode_entries(list(self._documents.values())))
        page.entries.sort(key=ScoreEntry.rank_key)
        page.entries = page.entries[:limit]
        return page
