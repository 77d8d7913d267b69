"""Configuration management for minigrep."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .display.themes import ThemeManager
from .error_handling.errors import ConfigError
from .filesystem.walker import default_thread_count

CONFIG_FILE_NAME = ".minigreprc"

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class SearchOptions:
    """Validated settings for one search run."""
    query: str
    root: Path
    ignore_case: bool = False
    stats_only: bool = False
    threads: int = 1
    include_hidden: bool = False
    respect_ignore_files: bool = True
    matching_only: bool = False
    theme: str = "default"
    lock_timeout: Optional[float] = None


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


class Config:
    """Configuration manager for minigrep.

    Values are layered: command-line overrides, then environment variables
    (a ``.env`` file is loaded first), then ``~/.minigreprc``, then defaults.
    """

    def __init__(self):
        """Initialize configuration with environment variables and config files."""
        load_dotenv()
        self.logger = logging.getLogger("minigrep.config")

        self.env_threads = os.getenv("MINIGREP_THREADS")
        self.env_theme = os.getenv("MINIGREP_THEME")
        self.env_hidden = os.getenv("MINIGREP_HIDDEN")
        self.env_no_ignore = os.getenv("MINIGREP_NO_IGNORE")
        self.env_log_level = os.getenv("MINIGREP_LOG_LEVEL")

        self.defaults = {
            "threads": default_thread_count(),
            "theme": "default",
            "hidden": False,
            "respect_ignore_files": True,
            "matching_only": False,
            "log_level": "WARNING",
            "lock_timeout": None,
        }

        self.user_config = self._load_user_config()

    @staticmethod
    def config_path() -> Path:
        return Path.home() / CONFIG_FILE_NAME

    def _load_user_config(self) -> Dict:
        """Load user configuration from ~/.minigreprc if it exists."""
        config_path = self.config_path()
        if not config_path.exists():
            return {}
        try:
            with open(config_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            self.logger.warning("Ignoring unreadable config file %s: %s", config_path, e)
            return {}
        if not isinstance(data, dict):
            self.logger.warning("Ignoring config file %s: expected a mapping", config_path)
            return {}
        return data

    def _setting(self, key: str, env_value: Optional[str] = None) -> Any:
        if env_value is not None:
            return env_value
        if key in self.user_config:
            return self.user_config[key]
        return self.defaults[key]

    def get_threads(self) -> int:
        """Configured worker count."""
        value = self._setting("threads", self.env_threads)
        try:
            threads = int(value)
        except (TypeError, ValueError):
            raise ConfigError(f"threads must be an integer, got {value!r}")
        if threads < 1:
            raise ConfigError(f"threads must be at least 1, got {threads}")
        return threads

    def get_theme(self) -> str:
        """Configured color theme name."""
        return str(self._setting("theme", self.env_theme)).lower()

    def get_include_hidden(self) -> bool:
        return _parse_bool("hidden", self._setting("hidden", self.env_hidden))

    def get_respect_ignore_files(self) -> bool:
        if self.env_no_ignore is not None:
            return not _parse_bool("MINIGREP_NO_IGNORE", self.env_no_ignore)
        return _parse_bool("respect_ignore_files", self._setting("respect_ignore_files"))

    def get_matching_only(self) -> bool:
        return _parse_bool("matching_only", self._setting("matching_only"))

    def get_log_level(self) -> int:
        """Configured logging level as a logging module constant."""
        name = str(self._setting("log_level", self.env_log_level)).upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ConfigError(f"Unknown log level {name!r}")
        return level

    def get_lock_timeout(self) -> Optional[float]:
        value = self._setting("lock_timeout")
        if value is None:
            return None
        try:
            timeout = float(value)
        except (TypeError, ValueError):
            raise ConfigError(f"lock_timeout must be a number, got {value!r}")
        if timeout <= 0:
            raise ConfigError(f"lock_timeout must be positive, got {timeout}")
        return timeout

    def build_options(self,
                      query: Optional[str],
                      path: Optional[str],
                      ignore_case: bool = False,
                      stats_only: bool = False,
                      threads: Optional[int] = None,
                      include_hidden: Optional[bool] = None,
                      no_ignore: Optional[bool] = None,
                      matching_only: Optional[bool] = None,
                      theme: Optional[str] = None) -> SearchOptions:
        """
        Validate command-line values against the configuration.

        Arguments left as None fall back to the configured value.

        Raises:
            ConfigError: If a value is missing or invalid
        """
        if query is None:
            raise ConfigError("A query is required")
        if path is None or path == "":
            raise ConfigError("A file or directory path is required")

        root = Path(path)

        if threads is None:
            threads = self.get_threads()
        elif threads < 1:
            raise ConfigError(f"threads must be at least 1, got {threads}")

        theme = (theme or self.get_theme()).lower()
        if theme not in ThemeManager.available_themes():
            raise ConfigError(
                f"Unknown theme {theme!r}, choose from {', '.join(ThemeManager.available_themes())}"
            )

        return SearchOptions(
            query=query,
            root=root,
            ignore_case=ignore_case,
            stats_only=stats_only,
            threads=threads,
            include_hidden=self.get_include_hidden() if include_hidden is None else include_hidden,
            respect_ignore_files=self.get_respect_ignore_files() if no_ignore is None else not no_ignore,
            matching_only=self.get_matching_only() if matching_only is None else matching_only,
            theme=theme,
            lock_timeout=self.get_lock_timeout(),
        )

    def create_default_config(self) -> Path:
        """Create a default ~/.minigreprc file for the user."""
        config_path = self.config_path()
        default_config = {
            "threads": default_thread_count(),
            "theme": "default",
            "hidden": False,
            "respect_ignore_files": True,
            "matching_only": False,
            "log_level": "WARNING",
        }

        with open(config_path, 'w') as f:
            yaml.dump(default_config, f, default_flow_style=False)
        return config_path
