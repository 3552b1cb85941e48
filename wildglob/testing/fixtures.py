"""Test fixtures for wildglob consumers.

These helpers build throwaway directory trees and observe how a scan
touches the filesystem, without reaching into engine internals.
"""

import os
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

from ..adapters.filesystem import FileSystemReader, ScandirCursor


class Symlink:
    """Marks a layout entry to be created as a symbolic link."""

    def __init__(self, target: Union[str, Path]):
        self.target = str(target)


Layout = Dict[str, Union[str, Symlink, "Layout"]]


def make_tree(base: Union[str, Path], layout: Layout) -> Path:
    """Create files, directories and symlinks below ``base``.

    Args:
        base: Existing directory to populate
        layout: Mapping of names to file content (str), a nested mapping
            (directory) or a Symlink

    Returns:
        ``base`` as a Path

    Example:
        make_tree(tmp, {
            "a": {"x.txt": "x", "sub": {"y.txt": "y"}},
            "loop": Symlink("a"),
        })
    """
    base = Path(base)
    for name, content in layout.items():
        target = base / name
        if isinstance(content, dict):
            target.mkdir(exist_ok=True)
            make_tree(target, content)
        elif isinstance(content, Symlink):
            os.symlink(content.target, target)
        else:
            target.write_text(content)
    return base


class RecordingReader(FileSystemReader):
    """FileSystemReader that records every directory it opens.

    It can also be told to fail on chosen directories, to exercise error
    policies without changing permissions on disk.

    Attributes:
        opened: Directories opened, in order
        open_cursors: Cursors handed out and not yet closed
    """

    def __init__(self, fail_on: Optional[Set[str]] = None,
                 error: type = PermissionError):
        self.opened: List[str] = []
        self.fail_on = {p.rstrip("/") for p in (fail_on or set())}
        self.error = error
        self._cursors: List[ScandirCursor] = []

    def open_directory(self, path: str) -> ScandirCursor:
        self.opened.append(path)
        if path.rstrip("/") in self.fail_on:
            raise self.error(13, "Simulated failure", path)
        cursor = super().open_directory(path)
        self._cursors.append(cursor)
        return cursor

    @property
    def open_cursors(self) -> List[ScandirCursor]:
        return [c for c in self._cursors if c._iterator is not None]

    def was_opened(self, path: str) -> bool:
        """Check whether a directory was listed, ignoring a trailing '/'."""
        wanted = path.rstrip("/")
        return any(p.rstrip("/") == wanted for p in self.opened)
