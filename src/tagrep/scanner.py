"""Concurrent directory scanner: one task per entry, joined on a barrier."""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Protocol

from tagrep import ScanAbortedError
from tagrep.criteria import MatchCriteria
from tagrep.filter import EntryFilter
from tagrep.matcher import Matcher, TagMatcher
from tagrep.reporter import Reporter
from tagrep.tags import TagError, TagPool

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScanTask:
    """A single filesystem entry waiting to be evaluated.

    Attributes:
        path: Entry path, joined onto the listed directory as given.
        name: Basename of the entry.
        is_dir: Whether the entry is a directory (symlinks are not).
        rel_path: Path relative to the scan root, ``/`` separated.
            Empty for a root itself.
    """

    path: str
    name: str
    is_dir: bool
    rel_path: str = ""

    def child(self, path: str, name: str, is_dir: bool) -> ScanTask:
        rel_path = f"{self.rel_path}/{name}" if self.rel_path else name
        return ScanTask(path=path, name=name, is_dir=is_dir, rel_path=rel_path)


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Options controlling a run, as opposed to what matches.

    Attributes:
        absolute: Report relative paths as absolute ones.
        fail_fast: Abort the whole run on the first unreadable directory.
        max_workers: Worker thread count. ``None`` uses the executor default.
    """

    absolute: bool = False
    fail_fast: bool = False
    max_workers: int | None = None


@dataclass(frozen=True, slots=True)
class ScanError:
    """A directory that could not be listed, or a task that crashed."""

    path: str
    message: str


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Final state of one run.

    Attributes:
        total: Non-directory entries observed.
        found: Entries that passed filtering and matched.
        matches: Reported paths in completion order.
        errors: Recoverable failures collected during the run.
        elapsed_ms: Wall time of the run in milliseconds.
    """

    total: int = 0
    found: int = 0
    matches: tuple[str, ...] = ()
    errors: tuple[ScanError, ...] = ()
    elapsed_ms: int = 0

    @property
    def ok(self) -> bool:
        """Whether the run finished without recorded errors."""
        return not self.errors


class ExcludeFilter(Protocol):
    """Protocol for entry exclusion, see ``tagrep.filter.PatternFilter``.

    Receives the entry path relative to its scan root.
    """

    def should_exclude(self, rel_path: str, is_dir: bool) -> bool: ...


class _NullFilter:
    """Default pass-through filter that excludes nothing."""

    def should_exclude(self, rel_path: str, is_dir: bool) -> bool:
        return False


class Counters:
    """The two run-wide counters shared by every task."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._total = 0
        self._found = 0

    def increment_total(self) -> None:
        with self._lock:
            self._total += 1

    def increment_found(self) -> None:
        with self._lock:
            self._found += 1

    @property
    def total(self) -> int:
        return self._total

    @property
    def found(self) -> int:
        return self._found


class PendingSet:
    """Count of tasks registered but not yet finished.

    A task must be added before it is submitted, and a parent must only
    call ``done`` after all of its children were added; otherwise
    ``wait`` can return while work is still outstanding.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._count = 0

    def add(self, n: int = 1) -> None:
        with self._cond:
            self._count += n

    def done(self) -> None:
        with self._cond:
            if self._count <= 0:
                raise RuntimeError("PendingSet.done() called more times than add()")
            self._count -= 1
            if self._count == 0:
                self._cond.notify_all()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the count drops to zero.

        Returns:
            bool: ``False`` if *timeout* expired first.
        """
        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout)

    def __len__(self) -> int:
        with self._cond:
            return self._count


class _Run:
    """State of a single search; never reused across calls."""

    def __init__(
        self,
        criteria: MatchCriteria,
        options: ScanOptions,
        exclude_filter: ExcludeFilter,
        matcher: Matcher,
    ) -> None:
        self.criteria = criteria
        self.options = options
        self.exclude_filter = exclude_filter
        self.entry_filter = EntryFilter.from_criteria(criteria)
        self.matcher = matcher
        self.counters = Counters()
        self.pending = PendingSet()
        self.reporter = Reporter(absolute=options.absolute)
        self.aborted = threading.Event()
        self._errors_lock = threading.Lock()
        self.errors: list[ScanError] = []
        self.fatal: ScanError | None = None
        self._executor: ThreadPoolExecutor | None = None

    def execute(self, roots: Iterable[str]) -> None:
        with ThreadPoolExecutor(
            max_workers=self.options.max_workers,
            thread_name_prefix="tagrep",
        ) as executor:
            self._executor = executor
            for root in roots:
                root_task = ScanTask(path=root, name=os.path.basename(root), is_dir=True)
                self._submit(self._scan_dir, root_task)
            self.pending.wait()

    def _record_error(self, path: str, message: str, fatal: bool = False) -> None:
        error = ScanError(path=path, message=message)
        with self._errors_lock:
            self.errors.append(error)
            if fatal and self.fatal is None:
                self.fatal = error

    def _submit(self, fn: Callable[[ScanTask], None], task: ScanTask) -> None:
        # Register before dispatch.
        self.pending.add()
        try:
            self._executor.submit(self._run_task, fn, task)
        except BaseException:
            self.pending.done()
            raise

    def _run_task(self, fn: Callable[[ScanTask], None], task: ScanTask) -> None:
        try:
            if not self.aborted.is_set():
                fn(task)
        except Exception as exc:
            logger.exception("Unexpected failure while scanning %s", task.path)
            self._record_error(task.path, repr(exc))
        finally:
            self.pending.done()

    def _scan_dir(self, parent: ScanTask) -> None:
        path = parent.path
        try:
            with os.scandir(path) as it:
                entries = list(it)
        except OSError as exc:
            message = exc.strerror or str(exc)
            self._record_error(path, message, fatal=self.options.fail_fast)
            if self.options.fail_fast:
                self.aborted.set()
                logger.debug("Aborting run: cannot list %s: %s", path, message)
            else:
                logger.warning("%s: %s", path, message)
            return

        for dir_entry in entries:
            try:
                is_dir = dir_entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False
            task = parent.child(dir_entry.path, dir_entry.name, is_dir)
            self._submit(self._visit, task)

    def _visit(self, task: ScanTask) -> None:
        if self.exclude_filter.should_exclude(task.rel_path, task.is_dir):
            return

        if task.is_dir:
            if self.criteria.recursive:
                self._submit(self._scan_dir, task)
            return

        self.counters.increment_total()

        try:
            size = os.stat(task.path).st_size
        except OSError as exc:
            logger.debug("%s: %s", task.path, exc)
            return

        if not self.entry_filter.is_eligible(task.name, size):
            return

        if self._evaluate(task.path):
            self.counters.increment_found()
            self.reporter.report(task.path)

    def _evaluate(self, path: str) -> bool:
        try:
            with open(path, "rb") as fileobj:
                return self.matcher.matches(fileobj, self.criteria)
        except (OSError, TagError) as exc:
            logger.debug("%s: %s", path, exc)
        return False


def search(
    roots: Iterable[str | os.PathLike[str]],
    criteria: MatchCriteria,
    options: ScanOptions | None = None,
    exclude_filter: ExcludeFilter | None = None,
    matcher: Matcher | None = None,
) -> SearchResult:
    """Scan every root concurrently and return the aggregated result.

    Entries are visited in whatever order the filesystem and the thread
    pool produce; ``matches`` is in completion order.

    Args:
        roots: Directories to scan.
        criteria: Immutable match configuration.
        options: Run options. Defaults to ``ScanOptions()``.
        exclude_filter: Optional exclusion filter implementation.
        matcher: Optional matcher. Defaults to a ``TagMatcher`` with a
            pool scoped to this call.

    Returns:
        SearchResult: Counters, matches and collected errors.

    Raises:
        ScanAbortedError: If ``options.fail_fast`` is set and a directory
            could not be listed.
    """
    scan_options = options or ScanOptions()

    if criteria.is_empty():
        logger.warning("No match criteria configured; nothing to scan")
        return SearchResult()

    run = _Run(
        criteria,
        scan_options,
        exclude_filter or _NullFilter(),
        matcher or TagMatcher(TagPool()),
    )

    started = time.perf_counter()
    run.execute(os.fspath(root) for root in roots)
    elapsed_ms = int((time.perf_counter() - started) * 1000)

    if run.fatal is not None:
        raise ScanAbortedError(run.fatal.path, run.fatal.message)

    return SearchResult(
        total=run.counters.total,
        found=run.counters.found,
        matches=tuple(run.reporter.paths),
        errors=tuple(run.errors),
        elapsed_ms=elapsed_ms,
    )
