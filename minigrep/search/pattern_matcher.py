"""
Literal pattern compilation and per-file line matching.
"""

import re
from dataclasses import dataclass
from typing import List, Pattern as RegexPattern, Tuple

from rich.text import Text

from ..display.report import visible_text
from ..error_handling.errors import PatternCompileError


@dataclass(frozen=True)
class Pattern:
    """Compiled literal query.

    The query is always escaped, so metacharacters only ever match
    themselves. Instances are immutable and shared by all workers.
    """
    query: str
    ignore_case: bool
    regex: RegexPattern

    @classmethod
    def compile(cls, query: str, ignore_case: bool = False) -> "Pattern":
        """Build a pattern from a literal query."""
        flags = re.IGNORECASE if ignore_case else 0
        try:
            regex = re.compile(re.escape(query), flags)
        except (re.error, TypeError) as e:
            raise PatternCompileError(f"Cannot compile query {query!r}: {e}")
        return cls(query=query, ignore_case=ignore_case, regex=regex)


@dataclass(frozen=True)
class MatchRecord:
    """One matching line of a file."""
    line_number: int
    line: str
    spans: Tuple[Tuple[int, int], ...]

    def render(self, highlight_style: str = "red") -> Text:
        """Line text with every matched span styled."""
        text = Text(visible_text(self.line))
        if highlight_style:
            for start, end in self.spans:
                text.stylize(highlight_style, start, end)
        return text


def split_lines(text: str) -> List[str]:
    """Split text into lines.

    Only ``\\n`` ends a line; one trailing ``\\r`` is dropped and a final
    newline does not produce an extra empty line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class LineMatcher:
    """Finds the lines of a file that contain a pattern."""

    @staticmethod
    def match_line(pattern: Pattern, line: str) -> Tuple[Tuple[int, int], ...]:
        """Non-overlapping occurrence spans of the pattern in one line."""
        return tuple(m.span() for m in pattern.regex.finditer(line))

    @classmethod
    def match_file(cls, pattern: Pattern, text: str) -> List[MatchRecord]:
        """
        Match every line of a file.

        Args:
            pattern: Compiled pattern
            text: Full file contents

        Returns:
            MatchRecords in increasing line order, one per matching line
        """
        records = []
        for line_number, line in enumerate(split_lines(text), start=1):
            spans = cls.match_line(pattern, line)
            if spans:
                records.append(MatchRecord(line_number, line, spans))
        return records

    @classmethod
    def count(cls, pattern: Pattern, text: str) -> int:
        """Number of lines containing the pattern."""
        return sum(1 for line in split_lines(text) if pattern.regex.search(line))
