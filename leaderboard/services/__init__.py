from .leaderboard import LeaderboardService, validate_submission

__all__ = ['LeaderboardService', 'validate_submission']
