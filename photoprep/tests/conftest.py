"""
Pytest fixtures for photoprep tests.
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor

import pytest
from PIL import Image


class FakePool:
    """Stands in for HashWorkerPool; records dispatched batches."""

    def __init__(self, max_workers=4, results=None):
        self.max_workers = max_workers
        self.results = results or {}
        self.batches = []
        self.dispatched = 0
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True

    def run_batch(self, items):
        from photoprep.hash_worker import HashResult

        self.batches.append([key for key, _ in items])
        self.dispatched += len(items)
        output = []
        for key, _ in items:
            output.append(self.results.get(
                key,
                HashResult(key=key, success=True, width=800, height=600, hash=f"hash-{key}"),
            ))
        return output


def write_image(path, size=(40, 30), color='red', format=None):
    """Write a small solid-color image and return its path."""
    img = Image.new('RGB', size, color=color)
    img.save(path, format=format)
    return path


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    return logging.getLogger('test')


@pytest.fixture
def make_image():
    """Fixture providing the image writer helper."""
    return write_image


@pytest.fixture
def fake_pool():
    """Fixture providing a fake pool where every task succeeds."""
    return FakePool()


@pytest.fixture
def thread_pool_factory():
    """Executor factory running hash tasks in threads instead of processes."""
    return lambda n: ThreadPoolExecutor(max_workers=n)


@pytest.fixture
def gallery_dirs(tmp_path):
    """Fixture providing empty source and published directories."""
    source = tmp_path / 'photos'
    published = tmp_path / 'public' / 'photos'
    source.mkdir()
    published.mkdir(parents=True)
    return source, published


@pytest.fixture
def gallery_config(tmp_path, gallery_dirs):
    """Fixture providing a DEV-mode config rooted in tmp_path."""
    from photoprep.gallery_config import GalleryConfig

    source, published = gallery_dirs
    return GalleryConfig(
        source_dir=str(source),
        published_dir=str(published),
        manifest_path=str(tmp_path / 'src' / 'photos.json'),
        cache_file=str(tmp_path / 'blurhash_cache.json'),
        env='DEV',
        workers=2,
    )


@pytest.fixture
def sample_cache_entry():
    """Fixture providing a sample cache entry."""
    from photoprep.photo_record import CacheEntry

    return CacheEntry(
        name='sunset',
        width=1000,
        height=400,
        width_scale=8,
        height_scale=3,
        hash='LEHV6nWB2yk8pyo0adR*.7kCMdnj',
    )


@pytest.fixture
def cache_file_with_entries(tmp_path, sample_cache_entry):
    """Fixture providing a cache file with one entry for sunset.jpg."""
    path = tmp_path / 'blurhash_cache.json'
    path.write_text(json.dumps({'sunset.jpg': sample_cache_entry.to_dict()}, indent=2))
    return path


@pytest.fixture
def fake_pool_class():
    """Fixture providing the FakePool class for custom results."""
    return FakePool
