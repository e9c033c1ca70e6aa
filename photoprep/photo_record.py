"""
Photo records - Cached hash results and the manifest entries built from them.
"""

import math
import os
from dataclasses import dataclass
from typing import Tuple


# Aspect difference (in pixels) below which a photo is laid out as a square
RANGE = 120


def js_round(value: float) -> int:
    """Round half up, as the gallery front end does."""
    return int(math.floor(value + 0.5))


def scale_factors(width: int, height: int) -> Tuple[int, int]:
    """
    Compute layout scale factors from pixel dimensions.

    Returns:
        Tuple of (width_scale, height_scale)
    """
    sub = abs(height - width)
    if sub < RANGE:
        return 1, 1
    return js_round(width / RANGE), js_round(height / RANGE)


def display_name(filename: str) -> str:
    """Filename without its final extension."""
    return os.path.splitext(filename)[0]


@dataclass
class CacheEntry:
    """
    Last successful hash result for a photo.

    Attributes:
        name: Filename without extension
        width: Pixel width
        height: Pixel height
        width_scale: Layout width factor
        height_scale: Layout height factor
        hash: BlurHash string
    """
    name: str
    width: int
    height: int
    width_scale: int
    height_scale: int
    hash: str

    @classmethod
    def from_result(cls, filename: str, width: int, height: int, hash_value: str) -> 'CacheEntry':
        """Build an entry from a fresh hash result."""
        width_scale, height_scale = scale_factors(width, height)
        return cls(
            name=display_name(filename),
            width=width,
            height=height,
            width_scale=width_scale,
            height_scale=height_scale,
            hash=hash_value,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'name': self.name,
            'width': self.width,
            'height': self.height,
            'widthScale': self.width_scale,
            'heightScale': self.height_scale,
            'hash': self.hash,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'CacheEntry':
        """Create from dictionary."""
        return cls(
            name=str(data['name']),
            width=int(data['width']),
            height=int(data['height']),
            width_scale=int(data['widthScale']),
            height_scale=int(data['heightScale']),
            hash=str(data['hash']),
        )


@dataclass(frozen=True)
class PhotoDescriptor:
    """
    A single manifest entry consumed by the gallery layout.

    ``width`` and ``height`` are scale factors; ``pixel_width`` and
    ``pixel_height`` are emitted as ``size``.
    """
    src: str
    title: str
    alt: str
    width: int
    height: int
    pixel_width: int
    pixel_height: int
    hash: str

    @classmethod
    def from_cache_entry(cls, filename: str, entry: CacheEntry, src_prefix: str) -> 'PhotoDescriptor':
        """Build a descriptor from a cache entry and a URL prefix."""
        return cls(
            src=src_prefix + filename,
            title=entry.name,
            alt=entry.name,
            width=entry.width_scale,
            height=entry.height_scale,
            pixel_width=entry.width,
            pixel_height=entry.height,
            hash=entry.hash,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'src': self.src,
            'title': self.title,
            'alt': self.alt,
            'width': self.width,
            'height': self.height,
            'size': {'height': self.pixel_height, 'width': self.pixel_width},
            'hash': self.hash,
        }
