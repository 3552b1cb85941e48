"""Core abstractions for wildglob.

This package contains the component types, the pattern compiler, the
DirectoryReader interface, derivation and the traversal frames. The
traversal engine itself is imported from ``wildglob.core.traverser``.
"""

from .component import (
    Component,
    LiteralComponent,
    WildcardComponent,
    EllipsisComponent,
    ELLIPSIS,
)
from .compiler import CompiledSpec, PatternCompiler, split_path, glob_to_regex
from .reader import DirectoryReader, DirectoryCursor, ListCursor
from .derive import Deriver
from .frame import Frame, FrameState

__all__ = [
    "Component",
    "LiteralComponent",
    "WildcardComponent",
    "EllipsisComponent",
    "ELLIPSIS",
    "CompiledSpec",
    "PatternCompiler",
    "split_path",
    "glob_to_regex",
    "DirectoryReader",
    "DirectoryCursor",
    "ListCursor",
    "Deriver",
    "Frame",
    "FrameState",
]
