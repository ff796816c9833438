"""Progress tracking for digest runs."""

from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass, field

from url_digester.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ProgressTracker:
    """Count results as the aggregator receives them.

    ``done`` turns true once a result has arrived for every dispatched job;
    the aggregator stops waiting at exactly that point.
    """

    total: int
    received: int = 0
    successful: int = 0
    failures_by_type: Counter[str] = field(default_factory=Counter)
    start_time: float = field(default_factory=time.monotonic)

    def record_success(self) -> None:
        self.received += 1
        self.successful += 1

    def record_failure(self, error_type: str) -> None:
        """Count a failed job under its error class name (``HttpError``, ``ByteError``...)."""
        self.received += 1
        self.failures_by_type[error_type] += 1

    @property
    def failed(self) -> int:
        return sum(self.failures_by_type.values())

    @property
    def done(self) -> bool:
        return self.received >= self.total

    @property
    def elapsed_seconds(self) -> float:
        return time.monotonic() - self.start_time

    def log_progress(self, every_n: int = 10) -> None:
        """Log every N results and once more when the last result arrives."""
        if self.received % every_n and self.received != self.total:
            return
        logger.info(
            "digest_progress",
            received=self.received,
            total=self.total,
            failed=self.failed,
            elapsed=f"{self.elapsed_seconds:.1f}s",
        )

    def summary(self) -> dict[str, int | float | dict[str, int]]:
        """Run totals, with failures broken down by error type."""
        return {
            "received": self.received,
            "successful": self.successful,
            "failed": self.failed,
            "failures_by_type": dict(self.failures_by_type),
            "duration_seconds": round(self.elapsed_seconds, 2),
        }
