"""
Compressor - Re-encodes newly added photos into the published directory.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from PIL import Image


class CompressionError(Exception):
    """Raised when any photo fails to re-encode; aborts the whole step."""

    def __init__(self, filename: str, cause: Exception):
        super().__init__(f"Failed to compress {filename}: {cause}")
        self.filename = filename
        self.cause = cause


@dataclass
class CompressionResult:
    """
    Outcome of a compression step.

    Attributes:
        written: Filenames written to the published directory
        skipped: Filenames with no re-encoding policy (not copied)
    """
    written: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class Compressor:
    """
    Re-encodes photos using Pillow.

    JPEG and PNG have a re-encoding policy; every other extension is
    skipped.
    """

    OUTPUT_FORMATS = {
        '.jpg': 'JPEG',
        '.jpeg': 'JPEG',
        '.png': 'PNG',
    }

    def __init__(
        self,
        quality: int = 80,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize compressor.

        Args:
            quality: JPEG quality for output (default: 80)
            logger: Optional logger instance
        """
        self.quality = quality
        self.logger = logger or logging.getLogger(__name__)

    def get_output_format(self, filename: str) -> Optional[str]:
        """Pillow format for a filename, or None if unsupported."""
        ext = os.path.splitext(filename)[1].lower()
        return self.OUTPUT_FORMATS.get(ext)

    def compress_all(
        self,
        additions: Iterable[str],
        source_dir: str,
        dest_dir: str
    ) -> CompressionResult:
        """
        Compress every added photo into dest_dir.

        Raises:
            CompressionError: on the first photo that fails
        """
        result = CompressionResult()
        dest = Path(dest_dir)
        dest.mkdir(parents=True, exist_ok=True)

        for filename in additions:
            output_format = self.get_output_format(filename)
            if output_format is None:
                self.logger.warning(f"Skipping {filename}: no compression policy for this extension")
                result.skipped.append(filename)
                continue

            try:
                self.compress(Path(source_dir) / filename, dest / filename, output_format)
            except Exception as e:
                self.logger.error(f"Error compressing {filename}: {e}")
                raise CompressionError(filename, e) from e

            result.written.append(filename)
            self.logger.debug(f"Compressed: {filename}")

        return result

    def compress(self, source: Path, dest: Path, output_format: str) -> None:
        """Re-encode a single photo."""
        with Image.open(source) as img:
            if output_format == 'JPEG':
                img = self._convert_color_mode(img)
                img.save(dest, format='JPEG', quality=self.quality, optimize=True)
            else:
                img.save(dest, format='PNG', optimize=True)

    def _convert_color_mode(self, img: Image.Image) -> Image.Image:
        """Flatten transparency onto white; JPEG stores only L and RGB."""
        if img.mode in ('RGBA', 'LA', 'P', 'PA'):
            rgba = img.convert('RGBA')
            flattened = Image.new('RGB', rgba.size, (255, 255, 255))
            flattened.paste(rgba, mask=rgba.getchannel('A'))
            return flattened
        if img.mode not in ('RGB', 'L'):
            return img.convert('RGB')
        return img
