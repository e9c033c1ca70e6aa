"""
PhotoPipeline - Runs reconciliation, compression, hashing and manifest output.
"""

import logging
from typing import Optional

from .compressor import Compressor
from .gallery_config import GalleryConfig
from .hash_cache import HashCache
from .hash_worker import HashWorkerPool
from .manifest_writer import ManifestWriter
from .orchestrator import BatchOrchestrator, OrchestrationResult
from .reconciler import DirectoryReconciler, ReconcilePlan
from .run_progress import RunObserver


class PhotoPipeline:
    """
    End-to-end manifest build.

    ``sync_published`` brings the published directory in line with the
    source; ``build_manifest`` hashes the published photos and writes the
    manifest. ``run`` does both.
    """

    def __init__(
        self,
        config: GalleryConfig,
        observer: Optional[RunObserver] = None,
        pool: Optional[HashWorkerPool] = None,
        compressor: Optional[Compressor] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline.

        Args:
            config: Run configuration
            observer: Optional progress observer
            pool: Optional hash worker pool (default: process pool sized by config)
            compressor: Optional compressor (default: Pillow at config quality)
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.observer = observer
        self.pool = pool
        self.compressor = compressor or Compressor(config.quality, logger=self.logger)
        self.reconciler = DirectoryReconciler(
            config.source_dir,
            config.published_dir,
            config.ignore_list,
            logger=self.logger,
        )

    def sync_published(self) -> ReconcilePlan:
        """
        Delete stale published photos and compress new ones.

        Raises:
            CompressionError: if any new photo fails to compress
        """
        plan = self.reconciler.plan()

        if plan.deletions:
            self.logger.info(f"Photos to delete: {plan.deletions}")
            self.reconciler.apply_deletions(plan.deletions)
            self.logger.info("Delete files success")

        if not plan.additions:
            self.logger.info("No new photos to compress")
            return plan

        self.logger.info(f"Photos to compress: {plan.additions}")
        result = self.compressor.compress_all(
            plan.additions, self.config.source_dir, self.config.published_dir
        )
        self.logger.info(
            f"Compressed {len(result.written)} photos"
            + (f", skipped {len(result.skipped)} unsupported" if result.skipped else "")
        )
        return plan

    def build_manifest(self) -> OrchestrationResult:
        """Hash the published photos and write the manifest."""
        cache = HashCache(self.config.cache_file, logger=self.logger)
        cache.load()

        candidates = self.reconciler.list_candidates()

        pool = self.pool or HashWorkerPool(
            self.config.workers,
            task_timeout=self.config.task_timeout,
            logger=self.logger,
        )
        with pool:
            orchestrator = BatchOrchestrator(
                cache=cache,
                pool=pool,
                photo_dir=self.config.published_dir,
                src_prefix=self.config.src_prefix,
                persist_every=self.config.persist_every,
                observer=self.observer,
                logger=self.logger,
            )
            result = orchestrator.run(candidates)

        writer = ManifestWriter(self.config.manifest_path, self.config.published_dir, logger=self.logger)
        writer.write(result.descriptors)
        writer.ensure_sentinel()

        return result

    def run(self) -> OrchestrationResult:
        """Full update: sync the published directory, then build the manifest."""
        self.sync_published()
        return self.build_manifest()
