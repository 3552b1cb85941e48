"""Filesystem reader for wildglob.

Implements the DirectoryReader interface on top of ``os.scandir`` so that
directory handles stay open between steps of a scan.
"""

import os
import sys
from typing import Hashable, Optional, Tuple

from ..core.reader import DirectoryCursor, DirectoryReader


def platform_case_insensitive() -> bool:
    """Default case sensitivity oracle.

    Windows and macOS filesystems compare names case-insensitively by
    default; everything else is treated as case-sensitive.
    """
    return sys.platform in ("win32", "cygwin", "darwin")


class ScandirCursor(DirectoryCursor):
    """Lazy cursor over an ``os.scandir`` iterator."""

    def __init__(self, path: str):
        self.path = path
        self._iterator = os.scandir(path)

    def read(self) -> Optional[str]:
        if self._iterator is None:
            return None
        try:
            entry = next(self._iterator)
        except StopIteration:
            self.close()
            return None
        return entry.name

    def close(self) -> None:
        if self._iterator is not None:
            self._iterator.close()
            self._iterator = None

    def __repr__(self) -> str:
        return f"ScandirCursor(path={self.path!r})"


class FileSystemReader(DirectoryReader):
    """DirectoryReader for the local filesystem."""

    def open_directory(self, path: str) -> ScandirCursor:
        """Open a directory; raises OSError like ``os.scandir``."""
        return ScandirCursor(path or ".")

    def exists(self, path: str) -> bool:
        if not path:
            return False
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path or ".")

    def is_symlink(self, path: str) -> bool:
        return os.path.islink(path.rstrip("/") or path)

    def identity(self, path: str) -> Hashable:
        """Device and inode of the directory a path resolves to.

        Falls back to the resolved path name where stat fails.
        """
        try:
            st = os.stat(path or ".")
        except OSError:
            return os.path.realpath(path or ".")
        ident: Tuple[int, int] = (st.st_dev, st.st_ino)
        return ident
