"""Tests for the per-file search task."""

import io
import os
from pathlib import Path

import pytest
from rich.console import Console

from minigrep.display.report import ReportRenderer
from minigrep.error_handling.errors import FileReadError
from minigrep.search.aggregator import FoundAnyFlag, ResultAggregator
from minigrep.search.file_search import FileSearchTask, resolve_path
from minigrep.search.pattern_matcher import Pattern


def make_renderer():
    buffer = io.StringIO()
    console = Console(file=buffer, no_color=True, force_terminal=False, width=200, highlight=False)
    return ReportRenderer(console), buffer


def make_task(query="foo", live_output=True, ignore_case=False):
    renderer, buffer = make_renderer()
    aggregator = ResultAggregator()
    flag = FoundAnyFlag()
    task = FileSearchTask(
        Pattern.compile(query, ignore_case),
        aggregator,
        flag,
        output=renderer.output,
        live_output=live_output,
    )
    return task, aggregator, flag, buffer


def test_process_prints_block_and_submits_stat(tmp_path):
    file_path = tmp_path / "x.txt"
    file_path.write_text("foo\nbar foo\nbaz\n", encoding="utf-8")
    task, aggregator, flag, buffer = make_task()

    outcome = task.process(file_path)

    assert outcome.ok
    assert outcome.stat.match_count == 2
    assert outcome.stat.path == file_path.resolve()
    assert flag.is_set()
    assert aggregator.drain() == [outcome.stat]

    lines = buffer.getvalue().splitlines()
    assert lines == [f"File: {file_path.resolve()}", "1: foo", "2: bar foo", ""]


def test_zero_match_file_still_gets_a_stat(tmp_path):
    file_path = tmp_path / "empty.txt"
    file_path.write_text("nothing here\n", encoding="utf-8")
    task, aggregator, flag, buffer = make_task()

    outcome = task.process(file_path)

    assert outcome.stat.match_count == 0
    assert not flag.is_set()
    assert len(aggregator.drain()) == 1
    assert buffer.getvalue() == ""


def test_live_output_disabled_prints_nothing(tmp_path):
    file_path = tmp_path / "x.txt"
    file_path.write_text("foo\n", encoding="utf-8")
    task, aggregator, flag, buffer = make_task(live_output=False)

    task.process(file_path)

    assert buffer.getvalue() == ""
    assert flag.is_set()
    assert aggregator.drain()[0].match_count == 1


def test_invalid_utf8_is_skipped(tmp_path):
    file_path = tmp_path / "binary.dat"
    file_path.write_bytes(b"foo\xff\xfe\n")
    task, aggregator, flag, buffer = make_task()

    outcome = task.process(file_path)

    assert not outcome.ok
    assert isinstance(outcome.error, FileReadError)
    assert outcome.stat is None
    assert aggregator.drain() == []
    assert not flag.is_set()


def test_missing_file_is_skipped(tmp_path):
    task, aggregator, flag, buffer = make_task()

    outcome = task.process(tmp_path / "gone.txt")

    assert isinstance(outcome.error, FileReadError)
    assert aggregator.drain() == []


@pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0,
                    reason="permissions are not enforced for root")
def test_unreadable_file_is_skipped(tmp_path):
    file_path = tmp_path / "secret.txt"
    file_path.write_text("foo\n", encoding="utf-8")
    file_path.chmod(0)
    try:
        task, aggregator, flag, buffer = make_task()
        outcome = task.process(file_path)
    finally:
        file_path.chmod(0o644)

    assert isinstance(outcome.error, FileReadError)
    assert aggregator.drain() == []


def test_resolve_path_falls_back_to_original():
    missing = Path("does/not/exist.txt")
    assert resolve_path(missing) == missing


def test_carriage_return_inside_line_is_shown(tmp_path):
    file_path = tmp_path / "cr.txt"
    file_path.write_bytes(b"a\rb foo\n")
    task, aggregator, flag, buffer = make_task()

    task.process(file_path)

    assert "1: a␍b foo" in buffer.getvalue().splitlines()
