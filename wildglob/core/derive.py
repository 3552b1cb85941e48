"""Derived path construction for wildglob.

A derive template builds a sibling path from the capture groups of the
pattern that matched a result, e.g. ``src/$1.o`` for ``src/(.*)\\.cpp``.
Templates are parsed once into literal text and group references; nothing
in a template is ever evaluated.

Template syntax:

``$n``      capture group n (1-indexed, ``$0`` is the whole match)
``${n}``    same, for use before digits
``$$``      a literal dollar sign
"""

import re
from typing import List, Pattern, Sequence, Tuple, Union

from ..errors import DerivationError

_REF = re.compile(r"\$(?:\$|\{(\d+)\}|(\d+))")

# A parsed template is a sequence of literal strings and group indices
Piece = Union[str, int]


def parse_template(template: str) -> Tuple[Piece, ...]:
    """Split a template into literal text and group references."""
    pieces: List[Piece] = []
    pos = 0
    for m in _REF.finditer(template):
        if m.start() > pos:
            pieces.append(template[pos:m.start()])
        pos = m.end()
        ref = m.group(1) or m.group(2)
        pieces.append("$" if ref is None else int(ref))
    if pos < len(template):
        pieces.append(template[pos:])
    return tuple(pieces)


class Deriver:
    """Builds ``[path, derived...]`` results from derive templates."""

    def __init__(self, templates: Sequence[str]):
        self.templates = list(templates)
        self._parsed = [parse_template(t) for t in self.templates]
        self._checked_against = None

    def check(self, matcher: Pattern) -> None:
        """Verify every referenced group exists in ``matcher``.

        Raises:
            DerivationError: On the first out-of-range reference
        """
        if matcher is self._checked_against:
            return
        for template, parsed in zip(self.templates, self._parsed):
            for piece in parsed:
                if isinstance(piece, int) and piece > matcher.groups:
                    raise DerivationError(template, piece, matcher.groups)
        self._checked_against = matcher

    def derive(self, path: str, matcher: Pattern) -> List[str]:
        """Return the matched path followed by one derived path per template.

        Derived paths are not checked for existence.
        """
        self.check(matcher)
        m = matcher.search(path)
        out = [path]
        for parsed in self._parsed:
            out.append("".join(
                piece if isinstance(piece, str) else (_group(m, piece))
                for piece in parsed
            ))
        return out


def _group(m, index: int) -> str:
    if m is None:
        return ""
    return m.group(index) or ""
