"""Pattern compilation for wildglob.

Turns a wildcard path specification into the two things the traversal
needs: an ordered tuple of components (drives directory listing) and a
whole-path regex with numbered capture groups (filters results and feeds
derive templates).

Syntax:

``*``       any run of characters except ``/``, captured
``?``       a run of k ``?`` matches exactly k characters, captured
``[...]``   character class, ``[!...]`` negated (not captured)
``(...)``   passed through as a user-authored capture group
``///``     zero or more directory levels, captured with its trailing ``/``
leading ``/``   absolute specification
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Sequence, Tuple, Union

from ..errors import PatternError
from .component import (
    ELLIPSIS,
    Component,
    LiteralComponent,
    WildcardComponent,
    is_ellipsis,
)

PathSpec = Union[str, Sequence[str]]
MatchSpec = Union[str, Pattern]

# Characters that turn a component into a wildcard
_MAGIC = re.compile(r"[*?\[]")

# glob tokens: ? runs, * runs, character classes, parentheses
_GTOK = re.compile(r"""
 \?+ |
 \*+ |
 \[ !? \]? [^\]]* \] |
 [()]
""", re.X)


def has_magic(text: str) -> bool:
    """Contains wildcard characters."""
    return _MAGIC.search(text) is not None


def glob_to_regex(glob: str) -> str:
    """Translate one glob component into a regex fragment.

    Wildcards become capture groups so they can be referenced from derive
    templates, in order of appearance. Parentheses are kept, anything else
    is escaped.
    """
    res = []
    pos = 0
    for m in _GTOK.finditer(glob):
        if m.start() > pos:
            res.append(re.escape(glob[pos:m.start()]))
        pos = m.end()

        tok = m.group(0)
        if tok[0] == "?":
            res.append("([^/]{%d})" % len(tok))
        elif tok[0] == "*":
            res.append("([^/]*)")
        elif tok[0] == "[":
            body = tok[1:-1]
            if body.startswith("!"):
                res.append("[^" + _escape_class(body[1:]) + "]")
            else:
                res.append("[" + _escape_class(body) + "]")
        else:
            res.append(tok)
    if pos < len(glob):
        res.append(re.escape(glob[pos:]))
    return "".join(res)


def _escape_class(body: str) -> str:
    # keep ranges working, neutralise regex-only syntax
    return body.replace("\\", "\\\\").replace("[", "\\[").replace("^", "\\^")


def split_path(path: Optional[PathSpec],
               absolute: Optional[bool] = None) -> Tuple[List[str], bool]:
    """Split a path specification into raw component strings.

    A string is split on ``/`` after collapsing every ``//`` to ``/``, which
    leaves an empty component wherever ``///`` was written. A pre-split list
    is taken as-is and must come with an explicit ``absolute``.

    Args:
        path: Path string, pre-split list, or None for an empty spec
        absolute: Required for pre-split lists, ignored for strings

    Returns:
        Tuple of (components, absolute)

    Raises:
        PatternError: If a pre-split list is given without ``absolute``
    """
    if path is None:
        return [], bool(absolute)

    if not isinstance(path, str):
        if absolute is None:
            raise PatternError(
                "A pre-split path needs an explicit 'absolute' flag"
            )
        parts = list(path)
        for part in parts:
            if not isinstance(part, str):
                raise PatternError(
                    f"Path components must be strings, got {part!r}"
                )
        return parts, bool(absolute)

    path = path.replace("//", "/")
    is_abs = path.startswith("/")
    if is_abs:
        path = path[1:]
    if path.startswith("./"):
        path = path[1:]

    parts = path.split("/")
    if parts and parts[0] == "":
        parts.pop(0)
    if parts and parts[-1] == "":
        parts.pop()
    return parts, is_abs


@dataclass
class CompiledSpec:
    """A path specification ready for traversal.

    ``matcher`` is mutable so the construction-time spec can have its match
    pattern replaced while a scan is in progress.
    """
    components: Tuple[Component, ...]
    matcher: Pattern
    absolute: bool = False
    follow: bool = False

    @property
    def root_path(self) -> str:
        return "/" if self.absolute else ""

    def __str__(self) -> str:
        body = "/".join(str(c) for c in self.components)
        return self.root_path + body.replace("//", "///")


class PatternCompiler:
    """Compiles path specifications with a fixed case sensitivity."""

    def __init__(self, case_insensitive: bool = False):
        self.case_insensitive = case_insensitive
        self._flags = re.IGNORECASE if case_insensitive else 0

    def compile(self,
                path: Optional[PathSpec],
                absolute: Optional[bool] = None,
                match: Optional[MatchSpec] = None,
                follow: bool = False) -> CompiledSpec:
        """Compile a path specification.

        Args:
            path: Path string, pre-split list, or None
            absolute: Required with a pre-split list
            match: Explicit whole-path pattern replacing the generated one
            follow: Whether ellipsis expansion follows symlinked directories

        Returns:
            CompiledSpec

        Raises:
            PatternError: On invalid patterns or an ambiguous pre-split path
        """
        parts, is_abs = split_path(path, absolute)
        components = tuple(self.component(part) for part in parts)

        if match is None:
            matcher = self._compile(self.whole_path_regex(components, is_abs))
        else:
            matcher = self.compile_match(match)

        return CompiledSpec(components, matcher, is_abs, follow)

    def component(self, text: str) -> Component:
        """Classify a raw component string."""
        if text == "":
            return ELLIPSIS
        if not has_magic(text):
            return LiteralComponent(text)
        return self.wildcard(text)

    def wildcard(self, glob: str, descent: bool = False) -> WildcardComponent:
        """Build a wildcard component with its per-entry regex compiled."""
        source = glob_to_regex(glob)
        return WildcardComponent(glob, source, self._compile(source), descent)

    def whole_path_regex(self, components: Sequence[Component],
                         absolute: bool) -> str:
        """Build the anchored regex matching complete result paths.

        Directories are produced with a trailing separator, hence the
        optional ``/`` before the end anchor.
        """
        pieces = ["^", "/" if absolute else ""]
        last = len(components) - 1
        for i, comp in enumerate(components):
            if is_ellipsis(comp):
                pieces.append("(.*)" if i == last else comp.fragment())
                continue
            pieces.append(comp.fragment())
            if i != last:
                pieces.append("/")
        pieces.append(r"/?\Z")
        return "".join(pieces)

    def compile_match(self, match: MatchSpec) -> Pattern:
        """Accept a compiled pattern as-is or compile a string one."""
        if isinstance(match, re.Pattern):
            return match
        if not isinstance(match, str):
            raise PatternError(
                f"match must be a string or compiled pattern, got {type(match).__name__}"
            )
        return self._compile(match)

    def _compile(self, source: str) -> Pattern:
        try:
            return re.compile(source, self._flags)
        except re.error as e:
            raise PatternError(f"Invalid pattern {source!r}: {e}") from e
