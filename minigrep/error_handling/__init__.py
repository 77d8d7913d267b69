"""
Error handling for minigrep.
"""

from .errors import (
    MinigrepError,
    ConfigError,
    PatternCompileError,
    FileReadError,
    TraversalEntryError,
    AggregationContentionError,
)
from .error_manager import ErrorManager

__all__ = [
    'MinigrepError',
    'ConfigError',
    'PatternCompileError',
    'FileReadError',
    'TraversalEntryError',
    'AggregationContentionError',
    'ErrorManager',
]
