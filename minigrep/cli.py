"""Main CLI entry point for minigrep."""

import logging
import sys
from typing import Optional

import typer
from rich.console import Console

from .config import Config
from .display.report import ReportRenderer
from .display.themes import get_theme
from .error_handling.error_manager import ErrorManager
from .error_handling.errors import MinigrepError
from .search.search_manager import SearchCoordinator

app = typer.Typer(
    name="minigrep",
    help="minigrep - multithreaded literal text search with colored output",
    add_completion=False,
)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: int) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger("minigrep").setLevel(level)


@app.command()
def search(
    query: Optional[str] = typer.Argument(None, help="Text to search for (matched literally)"),
    path: Optional[str] = typer.Argument(None, help="File or directory to search"),
    ignore_case: bool = typer.Option(False, "--ignore-case", "-i", help="Ignore case when matching"),
    stats_only: bool = typer.Option(False, "--stats-only", "-l", help="Only show statistics, not matching lines"),
    threads: Optional[int] = typer.Option(None, "--threads", "-t", help="Number of worker threads"),
    hidden: bool = typer.Option(False, "--hidden", help="Search hidden files and directories"),
    no_ignore: bool = typer.Option(False, "--no-ignore", help="Don't respect .gitignore and .ignore files"),
    matching_only: bool = typer.Option(False, "--matching-only", help="List only files with matches in the statistics"),
    theme: Optional[str] = typer.Option(None, "--theme", help="Color theme: default, mono or ocean"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    init_config: bool = typer.Option(False, "--init-config", help="Write a default ~/.minigreprc and exit"),
    version: bool = typer.Option(False, "--version", "-V", help="Show version and exit"),
) -> None:
    """
    Search QUERY in every file under PATH.

    Matching lines are printed per file, followed by a statistics block
    with the match count of every scanned file.
    """
    console = Console(highlight=False)

    if version:
        from . import __version__
        console.print(f"minigrep version {__version__}")
        return

    error_manager = ErrorManager(Console(stderr=True, highlight=False))

    try:
        config = Config()
        setup_logging(logging.DEBUG if verbose else config.get_log_level())

        if init_config:
            config_path = config.create_default_config()
            console.print(f"Created default config file at {config_path}")
            return

        options = config.build_options(
            query,
            path,
            ignore_case=ignore_case,
            stats_only=stats_only,
            threads=threads,
            include_hidden=True if hidden else None,
            no_ignore=True if no_ignore else None,
            matching_only=True if matching_only else None,
            theme=theme,
        )

        renderer = ReportRenderer(
            console,
            theme=get_theme(options.theme),
            matching_only=options.matching_only,
        )
        coordinator = SearchCoordinator.from_options(options, renderer, error_manager)
        coordinator.run(
            options.query,
            options.root,
            ignore_case=options.ignore_case,
            stats_only=options.stats_only,
        )
    except MinigrepError as e:
        error_manager.report_fatal(e)
        raise typer.Exit(1)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
