import time
from fastapi import APIRouter, Depends, Request
from ..models.response import HealthResponse, MetricsResponse
from ..services import LeaderboardService
from ..logger import get_logger
from .dependencies import get_service

logger = get_logger(__name__)
router = APIRouter()

@router.get("/health", response_model=HealthResponse)
@router.head("/health")
async def health_check(request: Request):
    """Health check endpoint"""
    response = HealthResponse(
        uptime=time.time() - request.app.state.start_time
    )
    logger.debug(f"Health check response: {response.model_dump()}")
    return response

@router.get("/metrics", response_model=MetricsResponse)
async def metrics(service: LeaderboardService = Depends(get_service)):
    """Counters for alerting, including records skipped as malformed"""
    return MetricsResponse(**service.metrics.snapshot())
