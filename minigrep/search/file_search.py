"""
Per-file search task run by the walker's worker threads.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .aggregator import FileStat, FoundAnyFlag, ResultAggregator
from .pattern_matcher import LineMatcher, Pattern
from ..error_handling.errors import FileReadError


@dataclass
class TaskOutcome:
    """What happened to one file."""
    path: Path
    stat: Optional[FileStat] = None
    error: Optional[FileReadError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def resolve_path(path: Path) -> Path:
    """Canonical absolute path, or the path unchanged if it can't be resolved."""
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError):
        return path


def read_text(path: Path) -> str:
    """Read a file as UTF-8 text, raising FileReadError on failure."""
    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise FileReadError("File is not valid UTF-8 text", path, cause=e)
    except OSError as e:
        raise FileReadError(f"Cannot read file ({e.strerror or e})", path, cause=e)


class FileSearchTask:
    """Searches one file at a time; one instance is shared by all workers.

    Everything it holds is either read-only (pattern, flags) or
    synchronized (output channel, aggregator, found flag).
    """

    def __init__(self,
                 pattern: Pattern,
                 aggregator: ResultAggregator,
                 found_flag: FoundAnyFlag,
                 output=None,
                 live_output: bool = True):
        """
        Args:
            pattern: Compiled query
            aggregator: Receives one FileStat per readable file
            found_flag: Marked when a file has at least one match
            output: OutputChannel for live file blocks
            live_output: Print matched lines as files complete
        """
        self.pattern = pattern
        self.aggregator = aggregator
        self.found_flag = found_flag
        self.output = output
        self.live_output = live_output and output is not None
        self.logger = logging.getLogger("minigrep.search")

    def process(self, path: Path) -> TaskOutcome:
        """Search one file. Never raises for I/O or decoding problems."""
        path = Path(path)
        try:
            text = read_text(path)
        except FileReadError as e:
            return TaskOutcome(path=path, error=e)

        records = LineMatcher.match_file(self.pattern, text)
        match_count = len(records)
        resolved = resolve_path(path)

        if self.live_output and match_count > 0:
            self.output.emit_file_block(resolved, records)

        if match_count > 0:
            self.found_flag.mark()

        stat = FileStat(path=resolved, match_count=match_count)
        self.aggregator.submit(stat)
        return TaskOutcome(path=path, stat=stat)
