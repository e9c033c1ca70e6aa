"""
GalleryConfig - Paths and settings for a photo manifest run.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


DEFAULT_IGNORE_LIST = ['.DS_Store', 'hidden']


def default_concurrency() -> int:
    """Worker count leaving one core for the orchestrating process."""
    return max(1, (os.cpu_count() or 1) - 1)


def read_package_cdn(package_json: str) -> Optional[str]:
    """
    Read the CDN base from a front-end package.json (``config.cdn``).

    Returns None if the file is missing or has no CDN configured.
    """
    path = Path(package_json)
    if not path.is_file():
        return None
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    config = data.get('config') if isinstance(data, dict) else None
    if not isinstance(config, dict):
        return None
    return config.get('cdn')


@dataclass
class GalleryConfig:
    """
    Configuration for a photo manifest run.

    Attributes:
        source_dir: Directory holding the original photos
        published_dir: Directory the compressed photos are published to
        manifest_path: Output manifest JSON file
        cache_file: BlurHash cache JSON file
        env: Mode selector; 'DEV' emits local src URLs
        cdn: Base URL for src in non-DEV mode
        local_prefix: Base path for src in DEV mode
        ignore_list: Substrings excluding filenames from every listing
        workers: Concurrent hash tasks per batch
        task_timeout: Seconds to wait for a batch before rejecting stalled tasks
        quality: Re-encoding quality for compressed photos
        persist_every: Fresh results between cache writes
    """
    source_dir: str = './photos/'
    published_dir: str = './public/photos/'
    manifest_path: str = './src/photos.json'
    cache_file: str = './blurhash_cache.json'
    env: str = ''
    cdn: Optional[str] = None
    local_prefix: str = './photos/'
    ignore_list: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_LIST))
    workers: int = field(default_factory=default_concurrency)
    task_timeout: Optional[float] = None
    quality: int = 80
    persist_every: int = 10

    @property
    def is_dev(self) -> bool:
        """True when src URLs point at the local photo directory."""
        return self.env == 'DEV'

    @property
    def src_prefix(self) -> str:
        """Prefix prepended to every filename in the manifest."""
        if self.is_dev:
            return self.local_prefix
        return self.cdn or ''

    @classmethod
    def from_env(cls, package_json: str = 'package.json') -> 'GalleryConfig':
        """
        Create configuration from environment variables.

        The CDN falls back to ``config.cdn`` in package.json when
        PHOTOPREP_CDN is not set.
        """
        config = cls()
        config.source_dir = os.getenv('PHOTOPREP_SOURCE_DIR', config.source_dir)
        config.published_dir = os.getenv('PHOTOPREP_PUBLISHED_DIR', config.published_dir)
        config.manifest_path = os.getenv('PHOTOPREP_MANIFEST', config.manifest_path)
        config.cache_file = os.getenv('PHOTOPREP_CACHE_FILE', config.cache_file)
        config.env = os.getenv('PHOTOPREP_ENV', os.getenv('NODE_ENV', ''))
        config.local_prefix = os.getenv('PHOTOPREP_LOCAL_PREFIX', config.local_prefix)
        config.cdn = os.getenv('PHOTOPREP_CDN') or read_package_cdn(package_json)

        ignore = os.getenv('PHOTOPREP_IGNORE')
        if ignore:
            config.ignore_list = [item.strip() for item in ignore.split(',') if item.strip()]

        workers = os.getenv('PHOTOPREP_WORKERS')
        if workers:
            config.workers = int(workers)

        timeout = os.getenv('PHOTOPREP_TASK_TIMEOUT')
        if timeout:
            config.task_timeout = float(timeout)

        return config

    def validate(self, require_cdn: bool = True) -> List[str]:
        """
        Validate configuration.

        Args:
            require_cdn: Whether src URLs will be emitted (manifest runs)

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if require_cdn and not self.is_dev and not self.cdn:
            errors.append("CDN base is required outside DEV mode (PHOTOPREP_CDN or --cdn)")
        if self.workers < 1:
            errors.append(f"workers must be at least 1 (got {self.workers})")
        if not 1 <= self.quality <= 100:
            errors.append(f"quality must be between 1 and 100 (got {self.quality})")
        if self.task_timeout is not None and self.task_timeout <= 0:
            errors.append(f"task timeout must be positive (got {self.task_timeout})")
        if self.persist_every < 1:
            errors.append(f"persist interval must be at least 1 (got {self.persist_every})")

        return errors
