"""In-process counters for the leaderboard core.

Skipped records are the signal operators alert on: a growing count means
corrupt documents are sitting in the store.
"""
from collections import Counter
from typing import Dict

from ..logger import get_logger

logger = get_logger(__name__)


class ServiceMetrics:
    def __init__(self):
        self.submissions = 0
        self.rejected_submissions = 0
        self.queries = 0
        self.skipped_records = 0
        self.store_errors = Counter()

    def record_submission(self):
        self.submissions += 1

    def record_rejection(self, kind: str):
        self.rejected_submissions += 1
        logger.debug(f"Submission rejected: {kind}")

    def record_query(self):
        self.queries += 1

    def record_skipped(self, count: int, operation: str):
        """Report records dropped while decoding a ranked query"""
        if count <= 0:
            return
        self.skipped_records += count
        logger.warning(f"{operation}: skipped {count} malformed record(s), {self.skipped_records} total")

    def record_store_error(self, kind: str):
        self.store_errors[kind] += 1

    def snapshot(self) -> Dict:
        return {
            'submissions': self.submissions,
            'rejected_submissions': self.rejected_submissions,
            'queries': self.queries,
            'skipped_records': self.skipped_records,
            'store_errors': dict(self.store_errors),
        }
