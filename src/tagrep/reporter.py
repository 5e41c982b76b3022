"""Collect matched paths in completion order."""

from __future__ import annotations

import os
import threading


class Reporter:
    """Thread-safe sink for matched paths.

    The working directory is captured once, at construction, so absolute
    conversion is stable for the whole run.
    """

    def __init__(self, absolute: bool = False, cwd: str | None = None) -> None:
        """Initialize reporter.

        Args:
            absolute: Convert relative paths to absolute ones.
            cwd: Directory relative paths are joined against. Defaults to
                the process working directory.
        """
        self._absolute = absolute
        self._cwd = cwd if cwd is not None else os.getcwd()
        self._lock = threading.Lock()
        self._paths: list[str] = []

    def resolve(self, path: str) -> str:
        """Return the display form of *path*.

        Already-absolute paths pass through unchanged.
        """
        if self._absolute and not os.path.isabs(path):
            return os.path.normpath(os.path.join(self._cwd, path))
        return path

    def report(self, path: str) -> None:
        display = self.resolve(path)
        with self._lock:
            self._paths.append(display)

    @property
    def paths(self) -> list[str]:
        with self._lock:
            return list(self._paths)
