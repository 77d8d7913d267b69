"""
Error taxonomy for minigrep.

Only ConfigError and PatternCompileError ever reach the command line; the
per-file and per-entry errors are absorbed by the component that detects them.
"""

from pathlib import Path
from typing import Optional, Union


class MinigrepError(Exception):
    """Base class for all minigrep errors."""

    category = "unknown"
    fatal = False

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        if self.path is not None:
            return f"{self.message}: {self.path}"
        return self.message


class ConfigError(MinigrepError):
    """Malformed or missing arguments or configuration values."""

    category = "configuration"
    fatal = True


class PatternCompileError(MinigrepError):
    """The query could not be compiled into a pattern."""

    category = "pattern"
    fatal = True


class FileReadError(MinigrepError):
    """A candidate file could not be read as text."""

    category = "file_read"

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, path)
        self.cause = cause


class TraversalEntryError(MinigrepError):
    """A directory entry could not be enumerated during the walk."""

    category = "traversal"

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, path)
        self.cause = cause


class AggregationContentionError(MinigrepError):
    """A file record was dropped because the collector lock timed out."""

    category = "aggregation"
