from .health import router as health_router
from .leaderboard import router as leaderboard_router
from .score import router as score_router

__all__ = ['health_router', 'leaderboard_router', 'score_router']
