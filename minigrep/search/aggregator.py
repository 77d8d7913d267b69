"""
Thread-safe collection of per-file results.
"""

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..error_handling.errors import AggregationContentionError
from ..error_handling.error_manager import ErrorManager


@dataclass(frozen=True)
class FileStat:
    """Match count for one scanned file."""
    path: Path
    match_count: int


class FoundAnyFlag:
    """Shared flag that can only go from unset to set."""

    def __init__(self):
        self._event = threading.Event()

    def mark(self) -> None:
        self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()

    def __bool__(self) -> bool:
        return self._event.is_set()


class ResultAggregator:
    """Append-only collector of FileStat records shared by all workers."""

    def __init__(self,
                 lock_timeout: Optional[float] = None,
                 error_manager: Optional[ErrorManager] = None):
        """
        Args:
            lock_timeout: Seconds to wait for the lock before dropping a
                record. None blocks until the lock is free.
            error_manager: Receives dropped submissions
        """
        self.lock_timeout = lock_timeout
        self.error_manager = error_manager
        self.logger = logging.getLogger("minigrep.aggregator")
        self._lock = threading.Lock()
        self._stats: List[FileStat] = []
        self._dropped_lock = threading.Lock()
        self.dropped = 0

    def submit(self, stat: FileStat) -> bool:
        """Add a record. Returns False if it was dropped under contention."""
        if self.lock_timeout is None:
            acquired = self._lock.acquire()
        else:
            acquired = self._lock.acquire(timeout=self.lock_timeout)

        if not acquired:
            self._drop(stat)
            return False

        try:
            self._stats.append(stat)
        finally:
            self._lock.release()
        return True

    def drain(self) -> List[FileStat]:
        """Take every collected record, leaving the collector empty."""
        with self._lock:
            stats, self._stats = self._stats, []
        return stats

    def __len__(self) -> int:
        with self._lock:
            return len(self._stats)

    def _drop(self, stat: FileStat) -> None:
        error = AggregationContentionError("Dropped file record, collector busy", stat.path)
        with self._dropped_lock:
            self.dropped += 1
        self.logger.warning("%s", error)
        if self.error_manager is not None:
            self.error_manager.record(error)
