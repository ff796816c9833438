"""Worker loop: fetch a job's URL, digest its body, report one result."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from url_digester.core.errors import DigestError, HashError
from url_digester.models.digest_job import DigestJob, DigestResult

if TYPE_CHECKING:
    import queue

    from url_digester.services.protocols import FetcherProtocol, HasherProtocol

logger = structlog.get_logger(__name__)


def _utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(UTC)


class DigestWorker:
    """Composes a fetcher and a hasher; holds no per-job state."""

    def __init__(self, fetcher: FetcherProtocol, hasher: HasherProtocol) -> None:
        self.fetcher = fetcher
        self.hasher = hasher

    def fetch_and_hash(self, url: str) -> str:
        """Fetch ``url`` once and return the hex digest of its body."""
        body = self.fetcher.fetch(url)
        try:
            return self.hasher.digest(body)
        except Exception as exc:
            raise HashError(
                f"failed to compute {self.hasher.name} digest ({exc})", url=url, cause=exc
            ) from exc

    def process(self, job: DigestJob) -> DigestResult:
        """Run one fetch attempt and capture its outcome, never raising."""
        started_at = _utc_now()
        checksum = ""
        error: DigestError | None = None
        try:
            checksum = self.fetch_and_hash(job.url)
        except DigestError as exc:
            error = exc
        except Exception as exc:
            # Third-party fetchers may raise outside the taxonomy.
            error = DigestError(str(exc) or type(exc).__name__, url=job.url, cause=exc)
        finished_at = _utc_now()

        if error is not None:
            logger.warning(
                "digest_job_failed",
                index=job.index,
                url=job.url,
                error_type=type(error).__name__,
                error=str(error),
            )

        return DigestResult(
            index=job.index,
            url=job.url,
            started_at=started_at,
            finished_at=finished_at,
            checksum=checksum,
            error=error,
        )

    def drain(
        self,
        jobs: queue.Queue[DigestJob | None],
        results: queue.Queue[DigestResult],
    ) -> None:
        """Process jobs until the stop sentinel (``None``) is taken."""
        while True:
            job = jobs.get()
            if job is None:
                return
            results.put(self.process(job))
