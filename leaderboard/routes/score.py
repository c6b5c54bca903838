from fastapi import APIRouter, Depends, HTTPException
from ..config import LeaderboardConfig
from ..core.errors import StoreError, SubmissionError
from ..models.score import ScoreRequest
from ..models.response import ScoreResponse
from ..services import LeaderboardService
from ..logger import get_logger
from .dependencies import get_service, get_settings, get_user_id, store_failure

logger = get_logger(__name__)
router = APIRouter()

@router.post("/api/v1/submit-score", response_model=ScoreResponse, status_code=201)
async def submit_score(
    data: ScoreRequest,
    user_id: str = Depends(get_user_id),
    service: LeaderboardService = Depends(get_service),
    settings: LeaderboardConfig = Depends(get_settings),
):
    """
    Record one finished game session.

    - **username**: Display name, must not be empty
    - **score**: Non-negative score value
    - **level**: Level reached
    - **platform**: Client platform tag, e.g. android or ios
    - **timestamp**: Ignored, the server assigns it
    """
    try:
        await service.submit_score(data.to_submission(user_id), timeout=settings.request_timeout)
        return ScoreResponse(message="Score Submitted Successfully")
    except SubmissionError as e:
        if e.is_validation:
            logger.info(f"Rejected submission from user {user_id}: {e.kind.value}")
            raise HTTPException(status_code=400, detail={"error": e.kind.value, "message": str(e)})
        if isinstance(e.__cause__, StoreError):
            raise store_failure(e.__cause__, "Internal server error")
        raise HTTPException(status_code=500, detail="Internal server error")
