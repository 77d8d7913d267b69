"""
Parallel directory walker.

Directories and files are both submitted as jobs to one thread pool, so a
large subtree is shared between all workers instead of being owned by the
thread that found it. Hidden entries and paths matched by ``.gitignore`` or
``.ignore`` files are skipped unless asked otherwise.
"""

import logging
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from pathspec import GitIgnoreSpec

from ..error_handling.errors import TraversalEntryError

IGNORE_FILES = ('.gitignore', '.ignore')

IgnoreChain = Tuple[Tuple[Path, GitIgnoreSpec], ...]


def default_thread_count() -> int:
    """Worker count matching the host's logical processors."""
    return os.cpu_count() or 1


class ParallelWalker:
    """Walks a tree with a fixed pool of worker threads."""

    def __init__(self,
                 root: Union[str, Path],
                 threads: Optional[int] = None,
                 include_hidden: bool = False,
                 respect_ignore_files: bool = True):
        self.root = Path(root)
        self.threads = threads or default_thread_count()
        self.include_hidden = include_hidden
        self.respect_ignore_files = respect_ignore_files
        self.logger = logging.getLogger("minigrep.walker")

        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending = 0
        self._idle = threading.Condition()
        self._on_error: Optional[Callable[[TraversalEntryError], None]] = None
        self._failure: Optional[BaseException] = None

    def run(self,
            visit: Callable[[Path], object],
            on_error: Optional[Callable[[TraversalEntryError], None]] = None) -> None:
        """
        Call ``visit`` for every regular file under the root.

        ``visit`` runs on worker threads. This method returns only after
        every submitted job has finished.

        Args:
            visit: Called once per regular file
            on_error: Called for entries that could not be enumerated
        """
        self._on_error = on_error
        self._failure = None
        self._executor = ThreadPoolExecutor(
            max_workers=self.threads, thread_name_prefix="minigrep-worker"
        )
        try:
            if self.root.is_dir():
                self._submit(self._walk_directory, self.root, (), visit)
            elif self.root.is_file():
                self._submit(visit, self.root)
            else:
                self._entry_error("Not a file or directory", self.root)
            self._wait_idle()
        finally:
            self._executor.shutdown(wait=True)
            self._executor = None

        if self._failure is not None:
            raise self._failure

    def _submit(self, fn: Callable, *args) -> None:
        with self._idle:
            self._pending += 1
        try:
            future = self._executor.submit(fn, *args)
        except BaseException:
            with self._idle:
                self._pending -= 1
                if self._pending == 0:
                    self._idle.notify_all()
            raise
        future.add_done_callback(self._job_done)

    def _job_done(self, future: Future) -> None:
        error = future.exception()
        if error is not None:
            self.logger.error("Worker job failed: %s", error)
        with self._idle:
            if error is not None and self._failure is None:
                self._failure = error
            self._pending -= 1
            if self._pending == 0:
                self._idle.notify_all()

    def _wait_idle(self) -> None:
        with self._idle:
            while self._pending:
                self._idle.wait()

    def _walk_directory(self, directory: Path, chain: IgnoreChain,
                        visit: Callable[[Path], object]) -> None:
        if self.respect_ignore_files:
            chain = self._extend_chain(directory, chain)

        try:
            with os.scandir(directory) as entries:
                children = list(entries)
        except OSError as e:
            self._entry_error(f"Cannot list directory ({e.strerror or e})", directory, e)
            return

        for entry in children:
            if not self.include_hidden and entry.name.startswith('.'):
                continue
            path = Path(entry.path)
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file(follow_symlinks=False)
            except OSError as e:
                self._entry_error(f"Cannot stat entry ({e.strerror or e})", path, e)
                continue

            if not (is_dir or is_file):
                continue
            if chain and self.is_ignored(path, is_dir, chain):
                self.logger.debug("Ignored %s", path)
                continue

            if is_dir:
                self._submit(self._walk_directory, path, chain, visit)
            else:
                self._submit(visit, path)

    def _extend_chain(self, directory: Path, chain: IgnoreChain) -> IgnoreChain:
        lines: List[str] = []
        for name in IGNORE_FILES:
            ignore_file = directory / name
            if not ignore_file.is_file():
                continue
            try:
                lines.extend(ignore_file.read_text(encoding='utf-8', errors='replace').splitlines())
            except OSError as e:
                self._entry_error(f"Cannot read ignore file ({e.strerror or e})", ignore_file, e)
        if not lines:
            return chain
        return chain + ((directory, GitIgnoreSpec.from_lines(lines)),)

    @staticmethod
    def is_ignored(path: Path, is_dir: bool, chain: IgnoreChain) -> bool:
        """Whether the innermost ignore file with an opinion excludes path."""
        for base, spec in reversed(chain):
            relative = path.relative_to(base).as_posix()
            if is_dir:
                relative += '/'
            result = spec.check_file(relative)
            if result.include is not None:
                return result.include
        return False

    def _entry_error(self, message: str, path: Path,
                     cause: Optional[BaseException] = None) -> None:
        error = TraversalEntryError(message, path, cause=cause)
        self.logger.debug("%s", error)
        if self._on_error is not None:
            self._on_error(error)
