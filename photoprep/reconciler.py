"""
Reconciler - Diffs the source and published photo directories.
"""

import logging
import math
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional


# Zero-byte marker keeping the published directory present in version control
SENTINEL_NAME = '.gitkeep'


@dataclass
class ReconcilePlan:
    """
    Work needed to bring the published directory in line with the source.

    Attributes:
        deletions: Published filenames with no source counterpart
        additions: Source filenames not yet published
    """
    deletions: List[str] = field(default_factory=list)
    additions: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.deletions and not self.additions


def filter_names(names: Iterable[str], ignore_list: Iterable[str]) -> List[str]:
    """Drop ignored names and duplicates, keeping first-seen order."""
    ignore = list(ignore_list)
    seen = set()
    result = []
    for name in names:
        if name in seen or any(pattern in name for pattern in ignore):
            continue
        seen.add(name)
        result.append(name)
    return result


def reconcile(
    source_names: Iterable[str],
    published_names: Iterable[str],
    ignore_list: Iterable[str]
) -> ReconcilePlan:
    """
    Compute deletions (published - source) and additions (source - published).

    Pure function: no filesystem access.
    """
    ignore = list(ignore_list)
    source = filter_names(source_names, ignore)
    published = filter_names(published_names, ignore)
    source_set = set(source)
    published_set = set(published)

    return ReconcilePlan(
        deletions=[name for name in published if name not in source_set],
        additions=[name for name in source if name not in published_set],
    )


def creation_time(path: Path) -> float:
    """
    Creation timestamp of a file.

    Unreadable files report +inf so they sort as most recent.
    """
    try:
        stat = path.stat()
    except OSError:
        return math.inf
    return getattr(stat, 'st_birthtime', stat.st_ctime)


class DirectoryReconciler:
    """
    Applies a ReconcilePlan to the published directory and lists candidates.
    """

    def __init__(
        self,
        source_dir: str,
        published_dir: str,
        ignore_list: Iterable[str],
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reconciler.

        Args:
            source_dir: Directory holding original photos
            published_dir: Directory holding published photos
            ignore_list: Substrings excluding filenames
            logger: Optional logger instance
        """
        self.source_dir = Path(source_dir)
        self.published_dir = Path(published_dir)
        self.ignore_list = list(ignore_list) + [SENTINEL_NAME]
        self.logger = logger or logging.getLogger(__name__)

    def ensure_published_dir(self) -> None:
        """Create the published directory if it does not exist."""
        if not self.published_dir.exists():
            self.logger.info(f"Creating published directory {self.published_dir}")
            self.published_dir.mkdir(parents=True, exist_ok=True)

    def plan(self) -> ReconcilePlan:
        """List both directories and compute the plan."""
        self.ensure_published_dir()
        published_names = sorted(os.listdir(self.published_dir))
        source_names = sorted(os.listdir(self.source_dir))
        return reconcile(source_names, published_names, self.ignore_list)

    def apply_deletions(self, deletions: Iterable[str]) -> List[str]:
        """
        Remove published entries best-effort.

        Stale directories are removed with their contents. A failure on one
        entry is logged and the rest are still removed.

        Returns:
            Names actually removed
        """
        removed = []
        for name in deletions:
            path = self.published_dir / name
            try:
                if path.is_dir() and not path.is_symlink():
                    shutil.rmtree(path)
                else:
                    os.remove(path)
            except FileNotFoundError:
                self.logger.debug(f"Already gone: {name}")
                continue
            except OSError as e:
                self.logger.warning(f"Could not delete {name}: {e}")
                continue
            removed.append(name)
            self.logger.debug(f"Deleted: {name}")

        if removed:
            self.logger.info(f"Deleted {len(removed)} published photos: {removed}")
        return removed

    def list_candidates(self) -> List[str]:
        """
        Published photos ordered newest first by creation time.

        Sorting is stable and never raises.
        """
        self.ensure_published_dir()
        names = filter_names(sorted(os.listdir(self.published_dir)), self.ignore_list)
        return sorted(
            names,
            key=lambda name: creation_time(self.published_dir / name),
            reverse=True,
        )
