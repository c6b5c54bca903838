# Drift Miner leaderboard service

import time
from typing import Optional
from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from .config import LeaderboardConfig, leaderboard
from .core.events import lifespan
from .core.metrics import ServiceMetrics
from .database import ScoreStore, create_store
from .routes import health_router, leaderboard_router, score_router
from .services import LeaderboardService
from .logger import configure_logging, get_logger

logger = get_logger(__name__)

def create_app(store: Optional[ScoreStore] = None, settings: LeaderboardConfig = leaderboard) -> FastAPI:
    """Wire the store and service into a FastAPI app.

    The store is opened on startup and closed on shutdown; routes reach the
    service through app.state, never through module globals.
    """
    configure_logging(settings.log_level)
    if store is None:
        store = create_store(settings, ServiceMetrics())

    app = FastAPI(
        default_response_class=ORJSONResponse,
        title="Drift Miner Leaderboard",
        description="Score submission and ranked leaderboard service",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.service = LeaderboardService(
        store,
        metrics=store.metrics,
        max_limit=settings.max_limit,
        default_limit=settings.default_limit,
    )
    app.state.start_time = time.time()

    app.include_router(health_router)
    app.include_router(score_router)
    app.include_router(leaderboard_router)
    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    logger.info(f"Drift Miner Backend listening on port {leaderboard.port}")
    uvicorn.run(
        "leaderboard.main:app",
        host=leaderboard.host,
        port=leaderboard.port,
        reload=leaderboard.app_env == "local",
        log_level=leaderboard.log_level.lower()
    )
