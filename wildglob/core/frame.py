"""Traversal frames for wildglob.

A Frame is one saved continuation of the emulated recursive enumeration:
which state to resume in, what is left of the path specification, the path
built so far and, while a directory is being listed, its open cursor.
"""

from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Deque, FrozenSet, Hashable, Optional, Tuple

from .compiler import CompiledSpec
from .component import Component, WildcardComponent
from .reader import DirectoryCursor


class FrameState(Enum):
    """States of the traversal state machine."""
    INITIAL = "initial"      # set up path and components for a root
    NEXT_DIR = "nextdir"     # consume the next component
    WILDCARD = "wildcard"    # read entries from an open directory
    ELLIPSIS = "ellipsis"    # expand one more directory level
    FINISHED = "finished"    # absorbing


@dataclass
class Frame:
    """One continuation of the traversal.

    Attributes:
        state: State to run when this frame is current
        spec: Root specification this frame belongs to
        remaining: Components still to consume
        path: Resulting path so far; directories end with '/'
        cursor: Open directory listing (WILDCARD and breadth-first ELLIPSIS)
        wildcard: Component the cursor entries are matched against
        visited: Directory identities entered along this descent chain
        pending: Directories awaiting listing (breadth-first ELLIPSIS only)
    """
    state: FrameState
    spec: Optional[CompiledSpec] = None
    remaining: Tuple[Component, ...] = ()
    path: str = ""
    cursor: Optional[DirectoryCursor] = None
    wildcard: Optional[WildcardComponent] = None
    visited: FrozenSet[Hashable] = frozenset()
    pending: Optional[Deque[Tuple[str, FrozenSet[Hashable]]]] = None

    @classmethod
    def initial(cls, spec: CompiledSpec) -> "Frame":
        return cls(FrameState.INITIAL, spec)

    @classmethod
    def finished(cls) -> "Frame":
        return cls(FrameState.FINISHED)

    def successor(self) -> "Frame":
        """Copy of this frame that owns no cursor or queue.

        Used when this frame is saved on the stack: the saved frame keeps
        its resources, the successor carries on without them.
        """
        return replace(self, cursor=None, pending=None)

    def close_cursor(self) -> None:
        """Close the open cursor, if any."""
        if self.cursor is not None:
            self.cursor.close()
            self.cursor = None

    def close(self) -> None:
        """Release everything this frame owns."""
        self.close_cursor()
        if self.pending is not None:
            self.pending = deque()

    def describe(self) -> str:
        """One-line summary for debug traces."""
        remaining = "/".join(str(c) for c in self.remaining)
        wildcard = self.wildcard.pattern if self.wildcard else ""
        return (f"resulting_path: {self.path} Wildcard: {wildcard} "
                f"path_remaining: {remaining}")
