"""DirectoryReader abstraction for wildglob.

The reader is the only way the traversal engine touches the filesystem.
Like a TreeAdapter it knows HOW to navigate one kind of storage, while the
engine only knows the order in which to ask. A reader hands out cursors,
which the engine keeps open across calls to ``next()``.
"""

from abc import ABC, abstractmethod
from typing import Callable, Hashable, List, Optional


class DirectoryCursor(ABC):
    """An open directory listing, read one entry at a time."""

    @abstractmethod
    def read(self) -> Optional[str]:
        """Return the next entry name, or None when exhausted."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the underlying directory handle. Safe to call twice."""
        pass


class ListCursor(DirectoryCursor):
    """Cursor over an already materialised list of names."""

    def __init__(self, names: List[str]):
        self._names = names
        self._pos = 0

    def read(self) -> Optional[str]:
        if self._pos >= len(self._names):
            return None
        name = self._names[self._pos]
        self._pos += 1
        return name

    def close(self) -> None:
        self._names = []
        self._pos = 0


def sorted_cursor(cursor: DirectoryCursor,
                  key: Callable[[str], object]) -> ListCursor:
    """Drain a cursor, close it, and return a cursor over the sorted names.

    Trades laziness for a deterministic order.
    """
    names = []
    try:
        while True:
            name = cursor.read()
            if name is None:
                break
            names.append(name)
    finally:
        cursor.close()
    names.sort(key=key)
    return ListCursor(names)


class DirectoryReader(ABC):
    """Abstract filesystem provider used by the traversal engine.

    Paths handed to a reader use ``/`` as separator and may carry a trailing
    separator when they name a directory.
    """

    @abstractmethod
    def open_directory(self, path: str) -> DirectoryCursor:
        """Open a directory for listing.

        Args:
            path: Directory to list ('.' for the current directory)

        Returns:
            DirectoryCursor over the entry names

        Raises:
            OSError: If the directory is missing, unreadable or not a directory
        """
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check whether a path exists (following symlinks)."""
        pass

    @abstractmethod
    def is_dir(self, path: str) -> bool:
        """Check whether a path is a directory (following symlinks)."""
        pass

    @abstractmethod
    def is_symlink(self, path: str) -> bool:
        """Check whether a path is itself a symbolic link."""
        pass

    @abstractmethod
    def identity(self, path: str) -> Hashable:
        """Return a canonical identity for a directory, used to detect
        symlink cycles. Two paths reaching the same directory must return
        equal identities."""
        pass
