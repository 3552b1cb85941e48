"""Path specification components for wildglob.

A path specification is split into an ordered tuple of components. The
traversal engine only needs to know which of three kinds each one is:

- LiteralComponent: a plain name, appended to the path as-is
- WildcardComponent: a glob fragment matched against directory entries
- EllipsisComponent: the ``///`` operator, zero or more directory levels

Components are immutable so frames can share them freely.
"""

import re
from dataclasses import dataclass, field
from typing import Pattern


class Component:
    """Base class for the three component kinds."""

    def fragment(self) -> str:
        """Return the regex fragment this component contributes to the
        whole-path matcher."""
        raise NotImplementedError


@dataclass(frozen=True)
class LiteralComponent(Component):
    """A component without wildcard syntax.

    Attributes:
        text: The name to append
        descent: True when the literal was produced by ellipsis expansion;
            such entries are subject to symlink and cycle checks
    """
    text: str
    descent: bool = False

    def fragment(self) -> str:
        return re.escape(self.text)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class WildcardComponent(Component):
    """A component containing ``*``, ``?`` or ``[...]``.

    Attributes:
        pattern: The original glob text
        source: Regex fragment translated from the glob
        regex: Compiled per-entry regex (case flag applied)
        descent: True for the synthetic "any entry" wildcard that the engine
            inserts when expanding an ellipsis
    """
    pattern: str
    source: str
    regex: Pattern = field(compare=False, repr=False)
    descent: bool = False

    def fragment(self) -> str:
        return self.source

    def matches(self, name: str) -> bool:
        """Check a single directory entry name against this wildcard."""
        return self.regex.fullmatch(name) is not None

    def __str__(self) -> str:
        return self.pattern


class EllipsisComponent(Component):
    """The recursive ``///`` operator.

    There is no per-instance state, so a single shared instance is used.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def fragment(self) -> str:
        # Captures the directory chain including its trailing separator
        return r"((?:.*/)?)"

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "EllipsisComponent()"


ELLIPSIS = EllipsisComponent()


def is_ellipsis(component: Component) -> bool:
    """Return True if the component is the ellipsis operator."""
    return component is ELLIPSIS


def needs_directory(components) -> bool:
    """Check whether any remaining component must be resolved inside a
    directory.

    Ellipses can consume zero levels, so a remainder made only of ellipses
    can still match the current path itself.
    """
    return any(not is_ellipsis(c) for c in components)
