"""
File system traversal for minigrep.
"""

from .walker import ParallelWalker, default_thread_count

__all__ = ['ParallelWalker', 'default_thread_count']
