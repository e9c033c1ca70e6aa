"""
ManifestWriter - Writes the photo manifest consumed by the gallery.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from .photo_record import PhotoDescriptor
from .reconciler import SENTINEL_NAME


class ManifestWriter:
    """
    Serializes resolved photos to the manifest file.
    """

    def __init__(
        self,
        manifest_path: str,
        published_dir: str,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize manifest writer.

        Args:
            manifest_path: Output JSON file, overwritten on every write
            published_dir: Directory that receives the keep-directory sentinel
            logger: Optional logger instance
        """
        self.manifest_path = Path(manifest_path)
        self.published_dir = Path(published_dir)
        self.logger = logger or logging.getLogger(__name__)

    def write(self, descriptors: List[PhotoDescriptor]) -> None:
        """Overwrite the manifest with descriptors in order."""
        self.manifest_path.parent.mkdir(parents=True, exist_ok=True)
        data = [descriptor.to_dict() for descriptor in descriptors]

        with open(self.manifest_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, separators=(',', ':'))

        self.logger.info(f"Manifest written to {self.manifest_path} ({len(data)} photos)")

    def ensure_sentinel(self) -> Path:
        """Create the zero-byte sentinel in the published directory."""
        self.published_dir.mkdir(parents=True, exist_ok=True)
        sentinel = self.published_dir / SENTINEL_NAME
        sentinel.write_bytes(b'')
        return sentinel
