"""
Photo manifest builder for a static gallery

Two steps per run:
    1. Compress: reconcile the source and published photo directories
       and re-encode new photos
    2. Hash: compute a BlurHash placeholder for every published photo
       (cached by filename) and write the ordered manifest

Hash tasks run in a bounded pool of worker processes, one batch at a time.
"""

__version__ = "1.0.0"

from .gallery_config import GalleryConfig
from .photo_record import CacheEntry, PhotoDescriptor, scale_factors
from .hash_cache import HashCache
from .reconciler import DirectoryReconciler, ReconcilePlan, reconcile
from .compressor import Compressor, CompressionError, CompressionResult
from .hash_worker import HashResult, HashWorkerPool, compute_blurhash
from .run_stats import RunStats
from .run_progress import RunObserver, RunProgress
from .orchestrator import BatchOrchestrator, OrchestrationResult
from .manifest_writer import ManifestWriter
from .pipeline import PhotoPipeline

__all__ = [
    "GalleryConfig",
    "CacheEntry",
    "PhotoDescriptor",
    "scale_factors",
    "HashCache",
    "DirectoryReconciler",
    "ReconcilePlan",
    "reconcile",
    "Compressor",
    "CompressionError",
    "CompressionResult",
    "HashResult",
    "HashWorkerPool",
    "compute_blurhash",
    "RunStats",
    "RunObserver",
    "RunProgress",
    "BatchOrchestrator",
    "OrchestrationResult",
    "ManifestWriter",
    "PhotoPipeline",
]
