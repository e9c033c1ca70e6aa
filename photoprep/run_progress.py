"""
RunProgress - Observer hooks for a manifest run and the logging implementation.
"""

import logging
from typing import List, Optional

from .photo_record import PhotoDescriptor
from .run_stats import RunStats


def format_progress_bar(current: int, total: int, length: int = 30) -> str:
    """Render e.g. ``[█████░░░░░] 5/10 (50%)``."""
    if total <= 0:
        return f"[{'█' * length}] 0/0 (100%)"
    percentage = current * 100 // total
    filled = current * length // total
    bar = '█' * filled + '░' * (length - filled)
    return f"[{bar}] {current}/{total} ({percentage}%)"


class RunObserver:
    """
    Receives orchestration events. Every hook is a no-op here.
    """

    def on_run_start(self, total: int, cached: int, concurrency: int) -> None:
        pass

    def on_batch_start(self, index: int, names: List[str]) -> None:
        pass

    def on_item_resolved(self, name: str, descriptor: PhotoDescriptor, from_cache: bool) -> None:
        pass

    def on_item_failed(self, name: str, error: str) -> None:
        pass

    def on_batch_complete(self, stats: RunStats) -> None:
        pass

    def on_run_complete(self, stats: RunStats) -> None:
        pass


class RunProgress(RunObserver):
    """
    Logs run progress with optional per-file output.
    """

    def __init__(
        self,
        show_files: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize progress tracker.

        Args:
            show_files: If True, log each photo as it resolves
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.logger = logger or logging.getLogger(__name__)
        self.total = 0
        self.seen = 0

    def on_run_start(self, total: int, cached: int, concurrency: int) -> None:
        self.total = total
        self.seen = 0
        percent = cached * 100 // total if total else 100
        self.logger.info(f"Found {total} photos to process")
        self.logger.info(f"{cached} photos found in cache ({percent}%)")
        self.logger.info(f"Processing with {concurrency} workers")

    def on_batch_start(self, index: int, names: List[str]) -> None:
        self.logger.debug(f"Batch {index + 1}: {', '.join(names)}")

    def on_item_resolved(self, name: str, descriptor: PhotoDescriptor, from_cache: bool) -> None:
        self.seen += 1
        if self.show_files:
            suffix = " (from cache)" if from_cache else ""
            self.logger.info(f"[{self.seen}/{self.total}] Processed: {name}{suffix}")

    def on_item_failed(self, name: str, error: str) -> None:
        self.seen += 1
        self.logger.error(f"[{self.seen}/{self.total}] Error processing {name}: {error}")

    def on_batch_complete(self, stats: RunStats) -> None:
        self.logger.info(format_progress_bar(stats.processed_count, stats.total))

    def on_run_complete(self, stats: RunStats) -> None:
        self.logger.info(
            f"Processing complete: {stats.total} total, {stats.cached} from cache, "
            f"{stats.resolved} newly processed, {stats.failed} failed "
            f"({stats.elapsed_seconds:.1f}s)"
        )
