"""
Concurrent literal text search for minigrep.
"""

from .pattern_matcher import Pattern, MatchRecord, LineMatcher
from .aggregator import FileStat, FoundAnyFlag, ResultAggregator
from .file_search import FileSearchTask, TaskOutcome
from .search_manager import SearchCoordinator, AggregateReport

__all__ = [
    'Pattern',
    'MatchRecord',
    'LineMatcher',
    'FileStat',
    'FoundAnyFlag',
    'ResultAggregator',
    'FileSearchTask',
    'TaskOutcome',
    'SearchCoordinator',
    'AggregateReport',
]
