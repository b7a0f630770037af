"""File access capability used by file-support mode.

The identifiers never touch the filesystem directly. They are handed a
``FileAccess`` object; environments without a filesystem (sandboxes, browser
runtimes, locked-down services) pass ``file_access=None`` and file support is
switched off, while tests can inject an in-memory implementation.
"""

from __future__ import annotations

import os
from typing import Mapping, Protocol


class FileScanError(Exception):
    """A file selected for scanning could not be read.

    Raised instead of returning an empty result, so an unreadable file is
    never mistaken for a file with no identifiable content.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not read {path}: {reason}")
        self.path = path
        self.reason = reason


class FileAccess(Protocol):
    """Filesystem operations needed to scan files."""

    def is_file(self, path: str) -> bool:
        """True if ``path`` names an existing regular file."""
        ...

    def read_bytes(self, path: str) -> bytes:
        """Return the full contents of ``path``. Raises OSError on failure."""
        ...


class LocalFileAccess:
    """FileAccess backed by the local filesystem."""

    def is_file(self, path: str) -> bool:
        try:
            return os.path.isfile(path)
        except ValueError:
            # Embedded NUL bytes and similar can never name a file.
            return False

    def read_bytes(self, path: str) -> bytes:
        with open(path, "rb") as fh:
            return fh.read()


class MemoryFileAccess:
    """FileAccess over an in-memory mapping of path → contents."""

    def __init__(self, files: Mapping[str, bytes]) -> None:
        self._files = dict(files)

    def is_file(self, path: str) -> bool:
        return path in self._files

    def read_bytes(self, path: str) -> bytes:
        try:
            return self._files[path]
        except KeyError:
            raise FileNotFoundError(path) from None


def read_file(file_access: FileAccess, path: str) -> bytes:
    """Read ``path`` through ``file_access``, converting OSError to FileScanError."""
    try:
        return file_access.read_bytes(path)
    except OSError as exc:
        raise FileScanError(path, exc.strerror or type(exc).__name__) from exc
