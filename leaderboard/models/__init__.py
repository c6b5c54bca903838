from .data import ScoreEntry, ScoreSubmission

__all__ = ["ScoreEntry", "ScoreSubmission"]
