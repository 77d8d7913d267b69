"""
Display components for minigrep.
"""

from .themes import ColorTheme, ThemeColors, ThemeManager, get_theme
from .report import ReportRenderer, OutputChannel, NO_MATCHES_NOTICE

__all__ = [
    'ColorTheme',
    'ThemeColors',
    'ThemeManager',
    'get_theme',
    'ReportRenderer',
    'OutputChannel',
    'NO_MATCHES_NOTICE',
]
