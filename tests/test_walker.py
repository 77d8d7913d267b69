"""Tests for the parallel directory walker."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from unittest.mock import patch

import pytest

from minigrep.filesystem.walker import ParallelWalker


def build_tree(root: Path, files):
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def collect(walker: ParallelWalker, errors=None):
    seen = []
    lock = threading.Lock()

    def visit(path):
        with lock:
            seen.append(path)

    walker.run(visit, on_error=errors.append if errors is not None else None)
    return sorted(p.relative_to(walker.root).as_posix() for p in seen)


def test_visits_every_regular_file(tmp_path):
    build_tree(tmp_path, {
        "a.txt": "a",
        "sub/b.txt": "b",
        "sub/deeper/c.txt": "c",
        "other/d.txt": "d",
    })

    assert collect(ParallelWalker(tmp_path, threads=4)) == [
        "a.txt", "other/d.txt", "sub/b.txt", "sub/deeper/c.txt",
    ]


def test_hidden_entries_skipped_unless_requested(tmp_path):
    build_tree(tmp_path, {
        "visible.txt": "v",
        ".hidden.txt": "h",
        ".config/settings.txt": "s",
    })

    assert collect(ParallelWalker(tmp_path)) == ["visible.txt"]
    assert collect(ParallelWalker(tmp_path, include_hidden=True)) == [
        ".config/settings.txt", ".hidden.txt", "visible.txt",
    ]


def test_gitignore_rules_are_honoured(tmp_path):
    build_tree(tmp_path, {
        ".gitignore": "*.log\nbuild/\n",
        "keep.txt": "k",
        "debug.log": "d",
        "build/out.txt": "o",
        "src/main.txt": "m",
        "src/.gitignore": "!important.log\n",
        "src/important.log": "i",
        "src/trace.log": "t",
    })

    assert collect(ParallelWalker(tmp_path)) == [
        "keep.txt", "src/important.log", "src/main.txt",
    ]


def test_ignore_files_can_be_disabled(tmp_path):
    build_tree(tmp_path, {
        ".gitignore": "*.log\n",
        "keep.txt": "k",
        "debug.log": "d",
    })

    assert collect(ParallelWalker(tmp_path, respect_ignore_files=False)) == [
        "debug.log", "keep.txt",
    ]


def test_single_file_root(tmp_path):
    file_path = tmp_path / "only.txt"
    file_path.write_text("x", encoding="utf-8")
    seen = []

    ParallelWalker(file_path).run(seen.append)

    assert seen == [file_path]


def test_missing_root_reports_entry_error(tmp_path):
    errors = []
    seen = []

    ParallelWalker(tmp_path / "missing").run(seen.append, on_error=errors.append)

    assert seen == []
    assert len(errors) == 1
    assert errors[0].category == "traversal"


def test_run_waits_for_every_job(tmp_path):
    """No visit may still be running once run() returns."""
    build_tree(tmp_path, {f"dir{i}/file{j}.txt": "x" for i in range(5) for j in range(10)})
    finished = []
    lock = threading.Lock()

    def slow_visit(path):
        time.sleep(0.005)
        with lock:
            finished.append(path)

    ParallelWalker(tmp_path, threads=4).run(slow_visit)

    assert len(finished) == 50


def test_unexpected_visit_failure_is_raised_after_walk(tmp_path):
    build_tree(tmp_path, {"a.txt": "a", "b.txt": "b"})

    def broken(path):
        raise ValueError(f"boom {path.name}")

    with pytest.raises(ValueError):
        ParallelWalker(tmp_path, threads=2).run(broken)


def test_symlinks_are_not_followed(tmp_path):
    build_tree(tmp_path, {"real/a.txt": "a"})
    try:
        (tmp_path / "link").symlink_to(tmp_path / "real", target_is_directory=True)
        (tmp_path / "file_link.txt").symlink_to(tmp_path / "real" / "a.txt")
    except (OSError, NotImplementedError):
        pytest.skip("symlinks not supported")

    assert collect(ParallelWalker(tmp_path)) == ["real/a.txt"]


def test_failed_submit_does_not_hang_the_walk(tmp_path):
    """A job that cannot be queued is released from the pending count."""
    build_tree(tmp_path, {"a.txt": "a", "sub/b.txt": "b"})
    real_submit = ThreadPoolExecutor.submit
    calls = []

    def flaky_submit(executor, fn, *args, **kwargs):
        calls.append(fn)
        if len(calls) > 1:
            raise RuntimeError("pool unavailable")
        return real_submit(executor, fn, *args, **kwargs)

    with patch.object(ThreadPoolExecutor, "submit", autospec=True, side_effect=flaky_submit):
        with pytest.raises(RuntimeError):
            ParallelWalker(tmp_path, threads=2).run(lambda path: None)
