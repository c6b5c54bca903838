from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from ..config import LeaderboardConfig
from ..core.errors import StoreCancelledError, StoreError, SubmissionError
from ..models.response import LeaderboardEntry
from ..services import LeaderboardService
from ..logger import get_logger
from .dependencies import get_service, get_settings, store_failure

logger = get_logger(__name__)
router = APIRouter()

@router.get("/api/v1/leaderboard", response_model=List[LeaderboardEntry])
async def get_leaderboard(
    limit: Optional[int] = Query(None, description="Number of entries to return, capped at the server maximum"),
    service: LeaderboardService = Depends(get_service),
    settings: LeaderboardConfig = Depends(get_settings),
):
    """
    Get the highest scores, best first.

    Equal scores are ordered by who reached them first.
    """
    try:
        entries = await service.get_leaderboard(limit, timeout=settings.request_timeout)
        logger.debug(f"Returning {len(entries)} leaderboard entries")
        return [LeaderboardEntry.from_entry(entry) for entry in entries]
    except SubmissionError as e:
        raise HTTPException(status_code=400, detail={"error": e.kind.value, "message": str(e)})
    except StoreCancelledError:
        raise
    except StoreError as e:
        raise store_failure(e, "Failed to fetch leaderboard")
