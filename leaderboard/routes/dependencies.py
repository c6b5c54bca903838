from fastapi import HTTPException, Request

from ..config import LeaderboardConfig
from ..core.errors import StoreError, StoreErrorKind
from ..services import LeaderboardService

def get_service(request: Request) -> LeaderboardService:
    return request.app.state.service

def get_settings(request: Request) -> LeaderboardConfig:
    return request.app.state.settings

def get_user_id(request: Request) -> str:
    """Verified user id forwarded by the identity provider / gateway"""
    header = request.app.state.settings.user_id_header
    user_id = request.headers.get(header, '').strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Missing verified user identity")
    return user_id

def store_failure(error: StoreError, message: str) -> HTTPException:
    """Generic HTTP error for a store failure; the cause stays in the logs"""
    if error.kind in (StoreErrorKind.UNAVAILABLE, StoreErrorKind.TIMEOUT):
        return HTTPException(status_code=503, detail="Service temporarily unavailable")
    return HTTPException(status_code=500, detail=message)
