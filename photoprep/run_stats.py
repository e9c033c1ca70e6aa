"""
RunStats - Statistics for a manifest run.
"""

import time
from dataclasses import dataclass, field
from typing import List


@dataclass
class RunStats:
    """
    Statistics for a manifest run.

    Attributes:
        total: Candidate photos in the run
        cached: Candidates resolved from the cache
        resolved: Candidates resolved by a fresh hash task
        failed: Candidates rejected by a failed hash task
        start_time: Start timestamp
        error_details: List of error messages
    """
    total: int = 0
    cached: int = 0
    resolved: int = 0
    failed: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def processed_count(self) -> int:
        """Candidates with a terminal outcome."""
        return self.cached + self.resolved + self.failed

    @property
    def remaining_count(self) -> int:
        return self.total - self.processed_count

    @property
    def percent_complete(self) -> int:
        if self.total == 0:
            return 100
        return int(self.processed_count * 100 // self.total)

    @property
    def rate_per_second(self) -> float:
        """Fresh hashes per second."""
        if self.elapsed_seconds > 0:
            return self.resolved / self.elapsed_seconds
        return 0.0
