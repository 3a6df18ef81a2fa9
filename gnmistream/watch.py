"""Interface for watching raw file contents for changes."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FileUpdate:
    """Contents of a watched file, or the error met reading that path.

    The path may name one file of several found under a watched path.
    """

    path: str
    contents: bytes = b""
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        """True when the update carries no path-specific error."""
        return self.error is None


class Watcher(abc.ABC):
    """Watches files at given paths for changes; the path format is
    specific to the filesystem behind the watcher.

    Watchers are context managers and are closed on exit.
    """

    @abc.abstractmethod
    def read(self, timeout: Optional[float] = None) -> FileUpdate:
        """Block until the next update for a file and return it.

        Several updates to one file are coalesced into the latest. Raises
        TimeoutError when timeout seconds pass without an update, and
        another exception when the watcher cannot continue; such an error
        may mean a new watcher is needed.
        """

    @abc.abstractmethod
    def add(self, path: str) -> None:
        """Start monitoring another path; no effect once closed."""

    @abc.abstractmethod
    def remove(self, path: str) -> None:
        """Stop monitoring a path given in the same form it was added."""

    @abc.abstractmethod
    def close(self) -> None:
        """Stop watching all files and release resources."""

    def __enter__(self) -> "Watcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()