from typing import Optional

from ..config import LeaderboardConfig, leaderboard
from ..core.metrics import ServiceMetrics
from .base import ScoreStore
from .connection import DatabaseConnection
from .memory import InMemoryScoreStore
from .score_store import PostgresScoreStore

__all__ = ['ScoreStore', 'DatabaseConnection', 'InMemoryScoreStore', 'PostgresScoreStore', 'create_store']

def create_store(config: LeaderboardConfig = leaderboard, metrics: Optional[ServiceMetrics] = None) -> ScoreStore:
    """Build the store selected by STORE_BACKEND"""
    backend = config.store_backend.lower()
    if backend == 'memory':
        return InMemoryScoreStore(metrics)
    if backend == 'postgres':
        return PostgresScoreStore(DatabaseConnection(), metrics)
    raise ValueError(f"Unknown store backend: {config.store_backend!r}")
