"""Row-parallel execution for transforms.

Each call gets its own ThreadPoolExecutor; workers fill disjoint row ranges of
a preallocated output array and the call only returns once every range is
done. numpy releases the GIL inside its inner loops, so threads give real
parallelism here without pickling buffers into processes.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass
import os

from pixform.utils import config, log

LOGGER = log.get_logger(__name__)

RowJob = Callable[[int, int], None]


@dataclass(frozen=True)
class TransformConfig:
    """Explicit per-call settings for transforms.

    Attributes:
        max_workers: Upper bound on worker threads (None or <= 0 means one per CPU).
        min_rows_per_worker: Jobs smaller than this many rows per worker run with fewer workers.
        default_filter: Name of the resample filter used when a caller passes none.
    """

    max_workers: int | None = None
    min_rows_per_worker: int = 64
    default_filter: str = "lanczos"

    @classmethod
    def from_config(cls) -> TransformConfig:
        """Build settings from the user TOML configuration."""
        return cls(
            max_workers=config.get_max_workers(),
            min_rows_per_worker=config.get_min_rows_per_worker(),
            default_filter=config.get_default_filter_name(),
        )

    def worker_count(self, rows: int) -> int:
        """Number of workers worth starting for ``rows`` output rows."""
        limit = self.max_workers if self.max_workers and self.max_workers > 0 else (os.cpu_count() or 1)
        by_rows = max(1, rows // max(1, self.min_rows_per_worker))
        return max(1, min(limit, by_rows))


DEFAULT_CONFIG = TransformConfig()


@contextmanager
def thread_executor(max_workers: int) -> Generator[ThreadPoolExecutor, None, None]:
    """Context manager for a short-lived ThreadPoolExecutor.

    Args:
        max_workers: Number of worker threads.

    Yields:
        ThreadPoolExecutor instance
    """
    executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="pixform")
    try:
        yield executor
    finally:
        executor.shutdown(wait=True)


def split_rows(rows: int, parts: int) -> list[tuple[int, int]]:
    """Split ``[0, rows)`` into at most ``parts`` contiguous, non-empty ranges."""
    parts = max(1, min(parts, rows))
    base, extra = divmod(rows, parts)
    ranges = []
    start = 0
    for i in range(parts):
        stop = start + base + (1 if i < extra else 0)
        if stop > start:
            ranges.append((start, stop))
        start = stop
    return ranges


def parallel_rows(rows: int, job: RowJob, settings: TransformConfig | None = None) -> None:
    """Run ``job(start, stop)`` over disjoint row ranges covering ``[0, rows)``.

    Exceptions raised by any worker propagate to the caller after all workers
    have finished.
    """
    if rows <= 0:
        return
    settings = settings or DEFAULT_CONFIG
    workers = settings.worker_count(rows)
    if workers == 1:
        job(0, rows)
        return

    ranges = split_rows(rows, workers)
    LOGGER.debug("Splitting %d rows across %d workers", rows, len(ranges))
    with thread_executor(len(ranges)) as executor:
        futures = [executor.submit(job, start, stop) for start, stop in ranges]
        for future in futures:
            future.result()
