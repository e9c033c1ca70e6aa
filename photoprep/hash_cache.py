"""
HashCache - Durable filename -> CacheEntry store.
"""

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Dict, Iterator, Optional

from .photo_record import CacheEntry


class HashCache:
    """
    BlurHash cache backed by a single JSON file.

    The orchestrator is the only writer. Every persist rewrites the whole
    file.
    """

    def __init__(self, path: str, logger: Optional[logging.Logger] = None):
        """
        Initialize cache store.

        Args:
            path: Path of the JSON cache file
            logger: Optional logger instance
        """
        self.path = Path(path)
        self.logger = logger or logging.getLogger(__name__)
        self._entries: Dict[str, CacheEntry] = {}

    def load(self) -> Dict[str, CacheEntry]:
        """
        Load entries from disk.

        A missing, unreadable or malformed file yields an empty cache.
        Individual malformed entries are dropped.
        """
        self._entries = {}

        if not self.path.exists():
            self.logger.info(f"No cache file at {self.path}, starting cold")
            return self._entries

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.warning(f"Could not load cache {self.path}: {e}")
            return self._entries

        if not isinstance(data, dict):
            self.logger.warning(f"Ignoring cache {self.path}: expected an object, got {type(data).__name__}")
            return self._entries

        for key, entry_data in data.items():
            try:
                self._entries[key] = CacheEntry.from_dict(entry_data)
            except (KeyError, TypeError, ValueError) as e:
                self.logger.warning(f"Dropping malformed cache entry {key!r}: {e}")

        self.logger.info(f"Loaded cache with {len(self._entries)} entries")
        return self._entries

    def get(self, key: str) -> Optional[CacheEntry]:
        """Get the entry for a filename, or None."""
        return self._entries.get(key)

    def put(self, key: str, entry: CacheEntry) -> None:
        """Insert or overwrite the entry for a filename."""
        self._entries[key] = entry

    def keys(self) -> Iterator[str]:
        return iter(self._entries.keys())

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def persist(self) -> None:
        """Rewrite the cache file with every entry."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {key: entry.to_dict() for key, entry in self._entries.items()}

        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix='.tmp'
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            os.chmod(tmp_path, self._file_mode())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

        self.logger.info(f"Cache saved with {len(self._entries)} entries")

    def _file_mode(self) -> int:
        """Permissions for the rewritten file: the current ones, else the umask default."""
        try:
            return stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask
