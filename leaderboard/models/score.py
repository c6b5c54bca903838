# --- Pydantic Models ---
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from .data import ScoreSubmission

# score and level are stored in INTEGER columns
INT32_MIN = -2**31
INT32_MAX = 2**31 - 1

class ScoreRequest(BaseModel):
    # username and score rules are enforced by LeaderboardService so that
    # rejections carry the domain error kind instead of a schema error
    username: str = Field('', max_length=64)
    score: int = Field(..., le=INT32_MAX)
    level: int = Field(0, ge=INT32_MIN, le=INT32_MAX)
    platform: str = Field('', max_length=32)
    timestamp: Optional[datetime] = None

    def to_submission(self, user_id: str) -> ScoreSubmission:
        return ScoreSubmission(
            user_id=user_id,
            username=self.username,
            score=self.score,
            level=self.level,
            platform=self.platform,
            timestamp=self.timestamp,
        )
