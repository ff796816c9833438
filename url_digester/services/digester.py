"""Bounded worker pool that fetches URLs and reports the digest of each body."""

from __future__ import annotations

import queue
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

import structlog

from url_digester.core.checksum import Md5Hasher
from url_digester.models.config import DEFAULT_REQUEST_TIMEOUT
from url_digester.models.digest_job import DigestJob, DigestResult
from url_digester.services.http_fetcher import HttpFetcher
from url_digester.services.worker import DigestWorker
from url_digester.utils.progress import ProgressTracker

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from url_digester.services.protocols import FetcherProtocol, HasherProtocol

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = DEFAULT_REQUEST_TIMEOUT


class Digester:
    """Fetches URLs with at most ``parallel`` requests in flight.

    The fetcher is shared by all workers of a run and must not be
    reconfigured (see ``set_timeout``) while ``run`` is executing. A single
    instance must not execute two runs at the same time.

    Callers are expected to resolve a usable ``parallel`` themselves (the CLI
    falls back to the configured default). The one check made here is that
    ``parallel`` is at least 1: with no workers a run would wait forever, so
    a smaller value raises ``ValueError`` instead of being clamped.
    """

    def __init__(
        self,
        parallel: int,
        fetcher: FetcherProtocol | None = None,
        hasher: HasherProtocol | None = None,
        request_timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if parallel < 1:
            msg = "parallel must be at least 1"
            raise ValueError(msg)
        self.parallel = parallel
        self.fetcher: FetcherProtocol = (
            fetcher if fetcher is not None else HttpFetcher(timeout=request_timeout)
        )
        self.hasher: HasherProtocol = hasher if hasher is not None else Md5Hasher()

    @property
    def request_timeout(self) -> float:
        return self.fetcher.timeout

    def set_timeout(self, seconds: float) -> None:
        """Replace the per-request timeout used by subsequent runs."""
        self.fetcher.timeout = seconds

    def run(self, urls: Sequence[str]) -> dict[str, str]:
        """Fetch every URL and map it to its hex digest or ``failed: <message>``.

        Returns only once a result has arrived for every URL. When a URL
        appears more than once, the entry holds whichever of its results was
        received last.
        """
        output: dict[str, str] = {}
        for result in self._results(urls):
            output[result.url] = result.render()
        return output

    def collect(self, urls: Sequence[str]) -> list[DigestResult]:
        """Like ``run`` but return every result, ordered by input position."""
        return sorted(self._results(urls), key=lambda result: result.index)

    def _results(self, urls: Sequence[str]) -> Iterator[DigestResult]:
        """Dispatch one job per URL and yield results in arrival order."""
        jobs = [DigestJob(index=index, url=url) for index, url in enumerate(urls)]
        if not jobs:
            return

        # Fresh queues per run so concurrent runs never share streams.
        job_queue: queue.Queue[DigestJob | None] = queue.Queue(maxsize=self.parallel)
        result_queue: queue.Queue[DigestResult] = queue.Queue()
        worker = DigestWorker(self.fetcher, self.hasher)
        tracker = ProgressTracker(total=len(jobs))

        logger.info("digest_run_started", urls=len(jobs), parallel=self.parallel)

        with ThreadPoolExecutor(
            max_workers=self.parallel + 1, thread_name_prefix="digester"
        ) as executor:
            for _ in range(self.parallel):
                executor.submit(worker.drain, job_queue, result_queue)
            feeder = executor.submit(self._feed, jobs, job_queue)

            while not tracker.done:
                result = result_queue.get()
                if result.succeeded:
                    tracker.record_success()
                else:
                    tracker.record_failure(type(result.error).__name__)
                tracker.log_progress()
                yield result

            feeder.result()

        summary = tracker.summary()
        logger.info(
            "digest_run_complete",
            received=summary["received"],
            successful=summary["successful"],
            failed=summary["failed"],
            failures_by_type=summary["failures_by_type"],
            duration_seconds=summary["duration_seconds"],
        )

    def _feed(self, jobs: list[DigestJob], job_queue: queue.Queue[DigestJob | None]) -> None:
        """Push every job, blocking while the queue is full, then stop each worker."""
        for job in jobs:
            job_queue.put(job)
        for _ in range(self.parallel):
            job_queue.put(None)
