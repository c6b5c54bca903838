from pydantic import BaseModel
from typing import Dict, Literal
from datetime import datetime

from .data import ScoreEntry

class LeaderboardEntry(BaseModel):
    user_id: str
    username: str
    score: int
    level: int
    timestamp: datetime
    platform: str

    @classmethod
    def from_entry(cls, entry: ScoreEntry) -> 'LeaderboardEntry':
        return cls(**entry.to_dict())

class HealthResponse(BaseModel):
    status: Literal["healthy"] = "healthy"
    uptime: float

class MetricsResponse(BaseModel):
    submissions: int
    rejected_submissions: int
    queries: int
    skipped_records: int
    store_errors: Dict[str, int]

class ScoreResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str
