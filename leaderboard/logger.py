import logging
from typing import Optional

from .config import leaderboard

LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'

_configured = False

def configure_logging(level: Optional[str] = None):
    """Install the root handler once per process"""
    global _configured
    if _configured:
        return
    logging.basicConfig(level=(level or leaderboard.log_level).upper(), format=LOG_FORMAT)
    _configured = True

def get_logger(name: str = 'leaderboard') -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
