"""
BatchOrchestrator - Resolves every candidate photo to a manifest entry.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .hash_cache import HashCache
from .hash_worker import HashResult, HashWorkerPool
from .photo_record import CacheEntry, PhotoDescriptor
from .run_progress import RunObserver
from .run_stats import RunStats


@dataclass
class OrchestrationResult:
    """
    Outcome of a run.

    Attributes:
        descriptors: Resolved photos in candidate order
        stats: Run statistics
    """
    descriptors: List[PhotoDescriptor] = field(default_factory=list)
    stats: RunStats = field(default_factory=RunStats)


def make_batches(items: List[str], size: int) -> List[List[str]]:
    """Split items into consecutive batches of at most size."""
    if size < 1:
        raise ValueError(f"batch size must be at least 1 (got {size})")
    return [items[i:i + size] for i in range(0, len(items), size)]


class BatchOrchestrator:
    """
    Drives cache lookups and hash tasks batch by batch.

    Sole writer of the cache: entries are stored only after a task result
    has been collected.
    """

    def __init__(
        self,
        cache: HashCache,
        pool: HashWorkerPool,
        photo_dir: str,
        src_prefix: str,
        batch_size: Optional[int] = None,
        persist_every: int = 10,
        observer: Optional[RunObserver] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize orchestrator.

        Args:
            cache: Loaded cache store
            pool: Hash worker pool
            photo_dir: Directory the candidate photos live in
            src_prefix: Prefix for manifest src URLs
            batch_size: Candidates per batch (default: pool size)
            persist_every: Fresh results between cache writes
            observer: Optional progress observer
            logger: Optional logger instance
        """
        self.cache = cache
        self.pool = pool
        self.photo_dir = Path(photo_dir)
        self.src_prefix = src_prefix
        self.batch_size = batch_size or pool.max_workers
        self.persist_every = persist_every
        self.observer = observer or RunObserver()
        self.logger = logger or logging.getLogger(__name__)
        self._unpersisted = 0

    def run(self, candidates: List[str]) -> OrchestrationResult:
        """
        Resolve candidates to descriptors.

        Per-photo hash failures are logged and excluded; they never fail
        the run.
        """
        cached = sum(1 for name in candidates if name in self.cache)
        result = OrchestrationResult(stats=RunStats(total=len(candidates)))
        self._unpersisted = 0

        self.observer.on_run_start(len(candidates), cached, self.batch_size)

        for index, batch in enumerate(make_batches(candidates, self.batch_size)):
            self.observer.on_batch_start(index, batch)
            result.descriptors.extend(self._process_batch(batch, result.stats))
            self.observer.on_batch_complete(result.stats)

        self.cache.persist()
        self._unpersisted = 0

        self.observer.on_run_complete(result.stats)
        return result

    def _process_batch(self, batch: List[str], stats: RunStats) -> List[PhotoDescriptor]:
        """Resolve one batch; output keeps batch order."""
        slots: List[Optional[PhotoDescriptor]] = [None] * len(batch)
        misses = []

        for i, name in enumerate(batch):
            entry = self.cache.get(name)
            if entry is None:
                misses.append(i)
                continue
            descriptor = PhotoDescriptor.from_cache_entry(name, entry, self.src_prefix)
            slots[i] = descriptor
            stats.cached += 1
            self.observer.on_item_resolved(name, descriptor, from_cache=True)

        items = [(batch[i], str(self.photo_dir / batch[i])) for i in misses]
        for i, task_result in zip(misses, self.pool.run_batch(items)):
            slots[i] = self._settle(batch[i], task_result, stats)

        return [descriptor for descriptor in slots if descriptor is not None]

    def _settle(self, name: str, task_result: HashResult, stats: RunStats) -> Optional[PhotoDescriptor]:
        """Merge one task result into the cache."""
        if not task_result.success:
            stats.failed += 1
            stats.error_details.append(f"{name}: {task_result.error}")
            self.observer.on_item_failed(name, task_result.error or 'unknown error')
            return None

        entry = CacheEntry.from_result(name, task_result.width, task_result.height, task_result.hash)
        self.cache.put(name, entry)
        stats.resolved += 1

        descriptor = PhotoDescriptor.from_cache_entry(name, entry, self.src_prefix)
        self.observer.on_item_resolved(name, descriptor, from_cache=False)

        self._unpersisted += 1
        if self._unpersisted >= self.persist_every:
            self.cache.persist()
            self._unpersisted = 0

        return descriptor
