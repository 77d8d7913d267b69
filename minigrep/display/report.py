"""
Console rendering for search results.

File blocks are printed by worker threads through OutputChannel; the final
statistics block is printed once by the coordinator.
"""

import threading
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from rich.console import Console
from rich.text import Text

from .themes import ThemeColors, get_theme

NO_MATCHES_NOTICE = "No matches found."
STATS_HEADING = "--------Statistics---------"
STATS_RULE = "---------------------------"

# rich drops these codes from Text; each maps to its one-character Unicode
# control picture so match offsets still line up.
CONTROL_PICTURES = {code: chr(0x2400 + code) for code in (7, 8, 11, 12, 13)}


def visible_text(text: str) -> str:
    """Replace control codes rich would strip with same-width placeholders."""
    return text.translate(CONTROL_PICTURES)


class ReportRenderer:
    """Builds and prints the text of a search run."""

    def __init__(self,
                 console: Optional[Console] = None,
                 theme: Optional[ThemeColors] = None,
                 matching_only: bool = False):
        self.console = console or Console(highlight=False)
        self.theme = theme or get_theme()
        self.matching_only = matching_only
        self.output = OutputChannel(self)

    def file_block(self, path: Path, records: Sequence) -> List[Text]:
        """Lines for one file's matches: header, one line per match, blank."""
        lines = [Text.assemble("File: ", (visible_text(str(path)), self.theme.path))]
        for record in records:
            lines.append(Text.assemble(
                (f"{record.line_number}:", self.theme.line_number),
                " ",
                record.render(self.theme.highlight),
            ))
        lines.append(Text(""))
        return lines

    def statistics_block(self, report) -> List[Text]:
        """Lines for the statistics block of a finished run."""
        listed = report.matching_stats if self.matching_only else report.stats

        lines = [Text(""), Text(STATS_HEADING, style=self.theme.heading)]
        for stat in listed:
            lines.append(Text.assemble(
                (visible_text(str(stat.path)), self.theme.path),
                " | Matches: ",
                (str(stat.match_count), self.theme.count),
            ))
        lines.append(Text(STATS_RULE, style=self.theme.heading))
        lines.append(Text.assemble("Files found: ", (str(report.files_scanned), self.theme.files)))
        lines.append(Text.assemble("Files with matches: ", (str(report.files_with_matches), self.theme.files)))
        lines.append(Text.assemble("Total matches: ", (str(report.total_matches), self.theme.count)))
        lines.append(Text.assemble("Elapsed: ", (f"{report.elapsed:.7f}s", self.theme.elapsed)))
        return lines

    def render_report(self, report) -> None:
        """Print the no-matches notice or the statistics block."""
        if not report.found_any:
            self.print_lines([Text(NO_MATCHES_NOTICE, style=self.theme.notice)])
            return
        self.print_lines(self.statistics_block(report))

    def print_lines(self, lines: Iterable[Text]) -> None:
        for line in lines:
            self.console.print(line, soft_wrap=True)


class OutputChannel:
    """Serialized access to the console for per-file blocks.

    Only the printing of an already-built block happens under the lock.
    """

    def __init__(self, renderer: ReportRenderer):
        self.renderer = renderer
        self._lock = threading.Lock()

    def emit_file_block(self, path: Path, records: Sequence) -> None:
        lines = self.renderer.file_block(path, records)
        with self._lock:
            self.renderer.print_lines(lines)
