"""
minigrep - multithreaded literal text search

Recursively searches a directory tree for a literal query, prints matching
lines with the matches highlighted and summarises match counts per file.
"""

__version__ = "1.0.0"
__description__ = "Multithreaded literal text search with colored output"

from .search import SearchCoordinator, AggregateReport

__all__ = ["SearchCoordinator", "AggregateReport"]
