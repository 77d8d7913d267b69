"""
Error reporting and bookkeeping for minigrep.
"""

import logging
import threading
from collections import Counter
from typing import Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .errors import MinigrepError


class ErrorManager:
    """Reports fatal errors and keeps a tally of absorbed ones."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self.logger = logging.getLogger("minigrep.errors")
        self._lock = threading.Lock()
        self._absorbed: Counter = Counter()

    def record(self, error: MinigrepError) -> None:
        """Record a non-fatal error that was absorbed by the pipeline.

        Safe to call from worker threads.
        """
        with self._lock:
            self._absorbed[error.category] += 1
        self.logger.debug("Skipped (%s): %s", error.category, error)

    def absorbed_count(self, category: Optional[str] = None) -> int:
        """Number of absorbed errors, optionally for one category."""
        with self._lock:
            if category is None:
                return sum(self._absorbed.values())
            return self._absorbed.get(category, 0)

    def summary(self) -> Dict[str, int]:
        """Snapshot of absorbed error counts by category."""
        with self._lock:
            return dict(self._absorbed)

    def report_fatal(self, error: BaseException) -> None:
        """Print a fatal error to the error console."""
        if isinstance(error, MinigrepError):
            title = f"minigrep: {error.category} error"
        else:
            title = "minigrep: error"

        self.logger.error("%s", error)
        self.console.print(
            Panel(Text(str(error), style="red"), title=title, border_style="red")
        )
