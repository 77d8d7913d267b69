"""
Search coordinator: compiles the query, runs the parallel walk and builds
the final report.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .aggregator import FileStat, FoundAnyFlag, ResultAggregator
from .file_search import FileSearchTask, TaskOutcome
from .pattern_matcher import Pattern
from ..display.report import ReportRenderer
from ..error_handling.error_manager import ErrorManager
from ..filesystem.walker import ParallelWalker


@dataclass(frozen=True)
class AggregateReport:
    """Totals of a finished run."""
    query: str
    stats: List[FileStat] = field(default_factory=list)
    found_any: bool = False
    elapsed: float = 0.0

    @property
    def files_scanned(self) -> int:
        return len(self.stats)

    @property
    def matching_stats(self) -> List[FileStat]:
        return [stat for stat in self.stats if stat.match_count > 0]

    @property
    def files_with_matches(self) -> int:
        return len(self.matching_stats)

    @property
    def total_matches(self) -> int:
        return sum(stat.match_count for stat in self.stats)


class SearchCoordinator:
    """Runs one search over a directory tree."""

    def __init__(self,
                 threads: Optional[int] = None,
                 include_hidden: bool = False,
                 respect_ignore_files: bool = True,
                 lock_timeout: Optional[float] = None,
                 renderer: Optional[ReportRenderer] = None,
                 error_manager: Optional[ErrorManager] = None):
        """
        Args:
            threads: Worker count, defaults to the number of logical processors
            include_hidden: Search hidden files and directories
            respect_ignore_files: Honour .gitignore and .ignore files
            lock_timeout: Passed to the ResultAggregator
            renderer: Prints file blocks and the final report; None is silent
            error_manager: Collects absorbed per-file and per-entry errors
        """
        self.threads = threads
        self.include_hidden = include_hidden
        self.respect_ignore_files = respect_ignore_files
        self.lock_timeout = lock_timeout
        self.renderer = renderer
        self.error_manager = error_manager or ErrorManager()
        self.logger = logging.getLogger("minigrep.search")

    @classmethod
    def from_options(cls, options, renderer: Optional[ReportRenderer] = None,
                     error_manager: Optional[ErrorManager] = None) -> "SearchCoordinator":
        """Build a coordinator from validated SearchOptions."""
        return cls(
            threads=options.threads,
            include_hidden=options.include_hidden,
            respect_ignore_files=options.respect_ignore_files,
            lock_timeout=options.lock_timeout,
            renderer=renderer,
            error_manager=error_manager,
        )

    def run(self,
            query: str,
            root_path: Union[str, Path],
            ignore_case: bool = False,
            stats_only: bool = False) -> AggregateReport:
        """
        Search every file under root_path for a literal query.

        Args:
            query: Literal text to look for
            root_path: Directory (or single file) to search
            ignore_case: Case-insensitive matching
            stats_only: Suppress per-line output, keep the statistics

        Returns:
            AggregateReport of the run

        Raises:
            PatternCompileError: If the query can't be compiled
        """
        pattern = Pattern.compile(query, ignore_case)
        self.logger.info("Searching for %r in %s", query, root_path)

        start_time = time.perf_counter()

        aggregator = ResultAggregator(self.lock_timeout, self.error_manager)
        found_any = FoundAnyFlag()
        task = FileSearchTask(
            pattern,
            aggregator,
            found_any,
            output=self.renderer.output if self.renderer else None,
            live_output=not stats_only,
        )

        walker = ParallelWalker(
            root_path,
            threads=self.threads,
            include_hidden=self.include_hidden,
            respect_ignore_files=self.respect_ignore_files,
        )

        def visit(path: Path) -> None:
            outcome: TaskOutcome = task.process(path)
            if not outcome.ok:
                self.error_manager.record(outcome.error)

        # Returns only once every dispatched task has finished.
        walker.run(visit, on_error=self.error_manager.record)

        elapsed = time.perf_counter() - start_time
        stats = sorted(aggregator.drain(), key=lambda stat: str(stat.path))
        report = AggregateReport(
            query=query,
            stats=stats,
            found_any=found_any.is_set(),
            elapsed=elapsed,
        )

        skipped = self.error_manager.absorbed_count()
        if skipped:
            self.logger.info("Skipped %d entries: %s", skipped, self.error_manager.summary())

        if self.renderer is not None:
            self.renderer.render_report(report)
        return report
