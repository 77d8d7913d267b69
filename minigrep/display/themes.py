"""
Theme management for minigrep output.
"""

from typing import Dict, List
from enum import Enum
from dataclasses import dataclass


class ColorTheme(Enum):
    """Available color themes."""
    DEFAULT = "default"
    MONO = "mono"
    OCEAN = "ocean"


@dataclass
class ThemeColors:
    """Styles used when printing search results."""
    path: str
    line_number: str
    highlight: str
    count: str
    files: str
    elapsed: str
    heading: str
    notice: str


class ThemeManager:
    """Manages display themes for minigrep."""

    def __init__(self):
        self.themes = self._initialize_themes()
        self.current_theme = ColorTheme.DEFAULT

    def _initialize_themes(self) -> Dict[ColorTheme, ThemeColors]:
        """Initialize available themes."""
        return {
            ColorTheme.DEFAULT: ThemeColors(
                path="blue",
                line_number="green",
                highlight="red",
                count="magenta",
                files="cyan",
                elapsed="purple",
                heading="bold",
                notice="yellow"
            ),
            ColorTheme.MONO: ThemeColors(
                path="bold",
                line_number="dim",
                highlight="reverse",
                count="bold",
                files="bold",
                elapsed="bold",
                heading="bold",
                notice="bold"
            ),
            ColorTheme.OCEAN: ThemeColors(
                path="bright_blue",
                line_number="cyan",
                highlight="bold bright_yellow",
                count="bright_cyan",
                files="bright_green",
                elapsed="blue",
                heading="bold bright_blue",
                notice="bright_yellow"
            ),
        }

    def set_theme(self, theme_name: str) -> bool:
        """Set the current theme by name."""
        try:
            self.current_theme = ColorTheme(theme_name.lower())
            return True
        except ValueError:
            return False

    def get_colors(self) -> ThemeColors:
        """Get colors for the current theme."""
        return self.themes[self.current_theme]

    @staticmethod
    def available_themes() -> List[str]:
        """Names accepted by set_theme."""
        return [theme.value for theme in ColorTheme]


def get_theme(theme_name: str = "default") -> ThemeColors:
    """Colors for a theme name, falling back to the default theme."""
    manager = ThemeManager()
    manager.set_theme(theme_name)
    return manager.get_colors()
