"""
Hash worker - Computes BlurHash placeholders in isolated worker processes.
"""

import concurrent.futures
import logging
from concurrent.futures import Executor, ProcessPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import blurhash
import numpy as np
from PIL import Image


COMPONENTS_X = 4
COMPONENTS_Y = 4

# Placeholder source is about a quarter of each original dimension
DOWNSAMPLE_FACTOR = 4


@dataclass
class HashResult:
    """
    Message sent back by a hash task.

    Attributes:
        key: Cache key (filename) the task was dispatched for
        success: Whether the hash was computed
        width: Original pixel width
        height: Original pixel height
        hash: BlurHash string
        error: Error message on failure
    """
    key: str
    success: bool
    width: int = 0
    height: int = 0
    hash: str = ''
    error: Optional[str] = None

    @classmethod
    def failure(cls, key: str, error: str) -> 'HashResult':
        return cls(key=key, success=False, error=error)


def downsample_size(width: int, height: int) -> Tuple[int, int]:
    """Target size for the placeholder source, at least 1x1."""
    return (
        max(1, round(width / DOWNSAMPLE_FACTOR)),
        max(1, round(height / DOWNSAMPLE_FACTOR)),
    )


def encode_image(img: Image.Image, components_x: int = COMPONENTS_X,
                 components_y: int = COMPONENTS_Y) -> str:
    """Down-sample an image and encode it as a BlurHash."""
    small = img.convert('RGB')
    small.thumbnail(downsample_size(*img.size), Image.Resampling.LANCZOS)
    return blurhash.encode(np.array(small), components_x=components_x, components_y=components_y)


def compute_blurhash(key: str, photo_path: str) -> HashResult:
    """
    Hash task run inside a worker process.

    Never raises; failures are reported in the result.
    """
    try:
        with Image.open(photo_path) as img:
            width, height = img.size
            hash_value = encode_image(img)
    except Exception as e:
        return HashResult.failure(key, f"{type(e).__name__}: {e}")

    return HashResult(key=key, success=True, width=width, height=height, hash=hash_value)


class HashWorkerPool:
    """
    Bounded pool running one hash task per photo.

    Owns a single executor for the run; use as a context manager.
    """

    def __init__(
        self,
        max_workers: int,
        executor_factory: Optional[Callable[[int], Executor]] = None,
        task: Callable[[str, str], HashResult] = compute_blurhash,
        task_timeout: Optional[float] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize worker pool.

        Args:
            max_workers: Maximum concurrent tasks
            executor_factory: Builds the executor (default: ProcessPoolExecutor)
            task: Module-level function run per photo
            task_timeout: Seconds to wait for a batch; None waits forever
            logger: Optional logger instance
        """
        self.max_workers = max_workers
        self.executor_factory = executor_factory or (lambda n: ProcessPoolExecutor(max_workers=n))
        self.task = task
        self.task_timeout = task_timeout
        self.logger = logger or logging.getLogger(__name__)
        self.dispatched = 0
        self._executor: Optional[Executor] = None

    def __enter__(self) -> 'HashWorkerPool':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _get_executor(self) -> Executor:
        if self._executor is None:
            self.logger.debug(f"Starting hash pool with {self.max_workers} workers")
            self._executor = self.executor_factory(self.max_workers)
        return self._executor

    def run_batch(self, items: List[Tuple[str, str]]) -> List[HashResult]:
        """
        Run one task per (key, path) and wait for all of them.

        Returns:
            Results in the same order as items
        """
        if not items:
            return []
        if len(items) > self.max_workers:
            raise ValueError(f"Batch of {len(items)} exceeds pool size {self.max_workers}")

        executor = self._get_executor()
        futures = [executor.submit(self.task, key, path) for key, path in items]
        self.dispatched += len(futures)

        _, not_done = concurrent.futures.wait(
            futures,
            timeout=self.task_timeout,
            return_when=concurrent.futures.ALL_COMPLETED,
        )

        results = []
        for (key, _), future in zip(items, futures):
            if future in not_done:
                results.append(HashResult.failure(key, f"timed out after {self.task_timeout}s"))
                continue
            try:
                results.append(future.result())
            except Exception as e:
                results.append(HashResult.failure(key, f"{type(e).__name__}: {e}"))

        if not_done:
            self._abandon_executor()
        return results

    def _abandon_executor(self) -> None:
        """
        Drop an executor with stalled tasks; the next batch starts a fresh one.

        Worker processes still running a stalled task are terminated so they
        cannot hold the interpreter open at exit.
        """
        self.logger.warning("Abandoning stalled hash tasks")
        processes = list((getattr(self._executor, '_processes', None) or {}).values())
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._executor = None

        for process in processes:
            if process.is_alive():
                self.logger.debug(f"Terminating hash worker {process.pid}")
                process.terminate()
        for process in processes:
            process.join()

    def close(self) -> None:
        """Shut the executor down, waiting for running tasks."""
        if self._executor is None:
            return
        self._executor.shutdown(wait=True)
        self._executor = None
