"""Traversal engine for wildglob.

The engine walks a compiled path specification one component at a time.
Expanding ``///`` is naturally recursive; here the recursion is emulated
with an explicit stack of Frames so the walk can stop after every result
and resume on the next call, with directory cursors left open in between.

Each call to ``advance()`` runs state handlers until a result is staged or
the FINISHED state is reached.
"""

import functools
from collections import deque
from dataclasses import replace
from typing import Callable, FrozenSet, Hashable, List, Optional, Pattern, Tuple, Union

from ..config import EllipsisOrder, SortComparison
from ..error_policies import ContinueOnErrorsPolicy, ErrorPolicy
from .compiler import CompiledSpec, PatternCompiler
from .component import (
    ELLIPSIS,
    LiteralComponent,
    WildcardComponent,
    is_ellipsis,
    needs_directory,
)
from .derive import Deriver
from .frame import Frame, FrameState
from .reader import DirectoryCursor, DirectoryReader, sorted_cursor

# Marks "nothing staged yet"; None is the end marker
_NOTHING = object()


class TraversalEngine:
    """Resumable state machine producing matching paths.

    The engine exclusively owns its frames and their directory cursors.
    Roots are installed with ``start``, ``append`` and ``prepend``; the
    public path-queue semantics live in ``Wildcard``.
    """

    def __init__(self,
                 reader: DirectoryReader,
                 compiler: PatternCompiler,
                 order: EllipsisOrder = EllipsisOrder.NORMAL,
                 sort: Union[bool, SortComparison] = False,
                 exclude: Optional[Pattern] = None,
                 deriver: Optional[Deriver] = None,
                 error_policy: Optional[ErrorPolicy] = None,
                 trace: Optional[Callable[[str], None]] = None):
        """Initialize the engine.

        Args:
            reader: Filesystem provider
            compiler: Compiler supplying the synthetic descent wildcard
            order: How ellipses walk the tree
            sort: False, True, or a comparison over full candidate paths
            exclude: Pattern pruning candidate paths and their subtrees
            deriver: Builds derived paths for each result
            error_policy: Decides what directory errors do
            trace: Receives debug trace lines
        """
        self.reader = reader
        self.order = order
        self.sort = sort
        self.exclude = exclude
        self.deriver = deriver
        self.error_policy = error_policy or ContinueOnErrorsPolicy()
        self._trace = trace
        self._case_insensitive = compiler.case_insensitive
        self._descend_any = compiler.wildcard("*", descent=True)

        self._frame = Frame.finished()
        self._stack: List[Frame] = []
        # root given to start(); its matcher feeds derivation for every root
        self._base: Optional[CompiledSpec] = None
        self._staged = _NOTHING
        self._handlers = {
            FrameState.INITIAL: self._state_initial,
            FrameState.NEXT_DIR: self._state_nextdir,
            FrameState.WILDCARD: self._state_wildcard,
            FrameState.ELLIPSIS: self._state_ellipsis,
            FrameState.FINISHED: self._state_finished,
        }

    # Root management

    def start(self, spec: CompiledSpec) -> None:
        """Drop all state and begin a fresh enumeration of ``spec``."""
        self.close()
        self._base = spec
        self._frame = Frame.initial(spec)

    def append(self, spec: CompiledSpec) -> None:
        """Run ``spec`` after everything currently pending."""
        self._stack.insert(0, Frame.initial(spec))
        if self._frame.state is FrameState.FINISHED:
            self._pop()

    def prepend(self, spec: CompiledSpec) -> None:
        """Run ``spec`` now, resuming the interrupted work afterwards."""
        if self._frame.state is not FrameState.FINISHED:
            self._save(self._frame)
        self._frame = Frame.initial(spec)

    def close(self) -> None:
        """Close every cursor and discard the stack."""
        self._frame.close()
        for frame in self._stack:
            frame.close()
        self._stack = []
        self._frame = Frame.finished()
        self._staged = _NOTHING

    @property
    def finished(self) -> bool:
        return self._frame.state is FrameState.FINISHED and not self._stack

    @property
    def depth(self) -> int:
        """Number of suspended frames."""
        return len(self._stack)

    # Stepping

    def advance(self):
        """Run until the next result is available.

        Returns:
            The next path (or ``[path, derived...]``), or None when exhausted
        """
        while self._staged is _NOTHING:
            self._debug(f"In state {self._frame.state.value}")
            self._handlers[self._frame.state]()
        value, self._staged = self._staged, _NOTHING
        self._debug(f"Returned {value}")
        return value

    def _state_initial(self) -> None:
        f = self._frame
        f.path = f.spec.root_path
        f.remaining = f.spec.components
        f.visited = frozenset()
        f.state = FrameState.NEXT_DIR

    def _state_finished(self) -> None:
        self._staged = None

    def _state_nextdir(self) -> None:
        f = self._frame

        if not f.remaining:
            path, spec = f.path, f.spec
            matched = spec.matcher.search(path) is not None and self.reader.exists(path)
            self._pop()
            if matched:
                self._staged = self._result(path, spec)
            return

        head = f.remaining[0]
        f.remaining = f.remaining[1:]

        if is_ellipsis(head):
            self._enter_ellipsis(f)
        elif isinstance(head, LiteralComponent):
            self._append_literal(f, head)
        else:
            self._open_wildcard(f, head)

    def _state_wildcard(self) -> None:
        f = self._frame
        while True:
            name = self._read(f)
            if name is None:
                f.close_cursor()
                self._pop()
                return
            if name in (".", "..") or not f.wildcard.matches(name):
                continue
            break

        self._push()
        f = self._frame
        f.remaining = (LiteralComponent(name, f.wildcard.descent),) + f.remaining
        f.state = FrameState.NEXT_DIR

    def _state_ellipsis(self) -> None:
        f = self._frame
        if f.pending is not None:
            self._step_breadth_first(f)
        else:
            self._expand(f)

    # Component handling

    def _append_literal(self, f: Frame, comp: LiteralComponent) -> None:
        extended = self._extend(f, comp.text, comp.descent)
        if extended is None:
            self._pop()
            return
        f.path, f.visited = extended
        if not self._descendable(f.path) and needs_directory(f.remaining):
            # a file cannot contain the rest of the pattern
            self._pop()

    def _open_wildcard(self, f: Frame, comp: WildcardComponent) -> None:
        try:
            cursor = self._open_cursor(f.path)
        except OSError as e:
            self._pop()
            self.error_policy.handle(e, "open_directory", f.path or ".")
            return
        f.cursor = cursor
        f.wildcard = comp
        f.state = FrameState.WILDCARD

    def _enter_ellipsis(self, f: Frame) -> None:
        if f.spec.follow and self._descendable(f.path):
            f.visited = f.visited | {self.reader.identity(f.path or ".")}

        if self.order is EllipsisOrder.BREADTH_FIRST:
            pending = deque()
            if self._descendable(f.path):
                pending.append((f.path, f.visited))
            self._save(replace(f, state=FrameState.ELLIPSIS, pending=pending))
            if not f.remaining:
                # the bare root is not a result in this order
                self._pop()
        elif self.order is EllipsisOrder.INSIDE_OUT:
            # the zero-level match waits until the levels below are done
            self._push()
            self._expand(self._frame)
        else:
            f.state = FrameState.ELLIPSIS
            self._push()
            self._frame.state = FrameState.NEXT_DIR

    def _expand(self, f: Frame) -> None:
        """Grow the ellipsis by one directory level."""
        if not self._descendable(f.path):
            self._pop()
            return
        f.remaining = (self._descend_any, ELLIPSIS) + f.remaining
        f.state = FrameState.NEXT_DIR

    def _step_breadth_first(self, f: Frame) -> None:
        while True:
            if f.cursor is None:
                if not f.pending:
                    self._pop()
                    return
                f.path, f.visited = f.pending.popleft()
                try:
                    f.cursor = self._open_cursor(f.path)
                except OSError as e:
                    self.error_policy.handle(e, "open_directory", f.path or ".")
                continue

            name = self._read(f)
            if name is None:
                f.close_cursor()
                continue
            if name in (".", ".."):
                continue

            extended = self._extend(f, name, True)
            if extended is None:
                continue
            path, visited = extended
            if self._descendable(path):
                f.pending.append((path, visited))
            elif needs_directory(f.remaining):
                continue
            break

        self._push()
        nf = self._frame
        nf.path, nf.visited = path, visited
        nf.state = FrameState.NEXT_DIR

    def _extend(self, f: Frame, name: str,
                descent: bool) -> Optional[Tuple[str, FrozenSet[Hashable]]]:
        """Append an entry name to the frame's path.

        Returns:
            (new path, visited chain), or None if the path is excluded.
            The new path ends with '/' only if traversal may enter it.
        """
        path = f.path + name
        if self.exclude is not None and self.exclude.search(path):
            self._debug(f"Excluded {path}")
            return None

        visited = f.visited
        if not self.reader.is_dir(path):
            return path, visited

        if descent:
            if not f.spec.follow and self.reader.is_symlink(path):
                return path, visited
            if f.spec.follow:
                ident = self.reader.identity(path)
                if ident in visited:
                    self._debug(f"Cycle at {path}")
                    return path, visited
                visited = visited | {ident}

        return path + "/", visited

    # Helpers

    @staticmethod
    def _descendable(path: str) -> bool:
        return path == "" or path.endswith("/")

    def _result(self, path: str, spec: CompiledSpec):
        if self.deriver is None:
            return path
        base = self._base if self._base is not None else spec
        return self.deriver.derive(path, base.matcher)

    def _open_cursor(self, directory: str) -> DirectoryCursor:
        cursor = self.reader.open_directory(directory or ".")
        if self.sort:
            cursor = sorted_cursor(cursor, self._sort_key(directory))
        return cursor

    def _sort_key(self, directory: str):
        if callable(self.sort):
            compare = self.sort
            return functools.cmp_to_key(lambda a, b: compare(directory + a, directory + b))
        if self._case_insensitive:
            return lambda name: (name.casefold(), name)
        return None

    def _read(self, f: Frame) -> Optional[str]:
        if f.cursor is None:
            return None
        try:
            return f.cursor.read()
        except OSError as e:
            f.close_cursor()
            self.error_policy.handle(e, "read_directory", f.path or ".")
            return None

    def _save(self, frame: Frame) -> None:
        self._debug("Push state: " + frame.describe())
        self._stack.append(frame)

    def _push(self) -> None:
        """Save the current frame and continue in a copy of it."""
        self._save(self._frame)
        self._frame = self._frame.successor()

    def _pop(self) -> None:
        """Resume the most recently saved frame, or finish."""
        self._frame = self._stack.pop() if self._stack else Frame.finished()
        self._debug(f"Pop state to {self._frame.state.value} " + self._frame.describe())

    def _debug(self, message: str) -> None:
        if self._trace is not None:
            self._trace(message)
