"""Configuration system for wildglob.

This module defines how users specify a wildcard scan: the path
specification, how results are filtered and derived, and the order in
which the ``///`` operator walks directory trees.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Pattern, Sequence, Union

from .adapters.filesystem import platform_case_insensitive


class EllipsisOrder(Enum):
    """How the ``///`` operator walks a tree.

    Different orders suit different jobs.
    """
    NORMAL = "normal"                # Directory before its contents
    BREADTH_FIRST = "breadth-first"  # Level by level, root omitted
    INSIDE_OUT = "inside-out"        # Contents before their directory


# Comparison over two full candidate paths, like the old cmp()
SortComparison = Callable[[str, str], int]


@dataclass
class WildcardConfig:
    """Complete configuration for a wildcard scan.

    ``Wildcard(**options)`` builds one of these and validates it before any
    filesystem operation happens.
    """

    # What to look for
    path: Optional[Union[str, Sequence[str]]] = None
    absolute: Optional[bool] = None
    match: Optional[Union[str, Pattern]] = None
    derive: Optional[Sequence[str]] = None

    # How to walk
    follow: bool = False
    case_insensitive: Optional[bool] = None
    exclude: Optional[Union[str, Pattern]] = None
    ellipsis_order: Union[EllipsisOrder, str] = EllipsisOrder.NORMAL
    sort: Union[bool, SortComparison] = False

    # Collaborators
    reader: Optional[Any] = None        # DirectoryReader, default FileSystemReader
    error_policy: Optional[Any] = None  # ErrorPolicy, default ContinueOnErrorsPolicy
    case_oracle: Callable[[], bool] = field(default=platform_case_insensitive)

    # Diagnostics: False, True (stderr), file-like object or callable
    debug: Any = False

    # Convenience constructors for common configurations

    @classmethod
    def deterministic(cls, path: Optional[str] = None, **kwargs) -> 'WildcardConfig':
        """Create config whose results do not depend on OS listing order.

        Args:
            path: Path specification
            **kwargs: Other options

        Returns:
            WildcardConfig with sorting enabled
        """
        kwargs.setdefault('sort', True)
        return cls(path=path, **kwargs)

    @classmethod
    def tree_listing(cls, root: str, order: Union[EllipsisOrder, str] = EllipsisOrder.NORMAL,
                     **kwargs) -> 'WildcardConfig':
        """Create config listing everything below a directory.

        Args:
            root: Directory to list
            order: Ellipsis order

        Returns:
            WildcardConfig for ``root///``
        """
        return cls(path=root.rstrip('/') + '///', ellipsis_order=order, **kwargs)

    def resolved_order(self) -> EllipsisOrder:
        """Return ``ellipsis_order`` as an enum value."""
        return parse_order(self.ellipsis_order)

    def resolved_case_insensitive(self) -> bool:
        """Explicit setting, or the platform oracle when unset."""
        if self.case_insensitive is not None:
            return bool(self.case_insensitive)
        return bool(self.case_oracle())

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.path is not None and not isinstance(self.path, str):
            if isinstance(self.path, (bytes, bytearray)):
                errors.append("path must be str, not bytes")
            elif self.absolute is None:
                errors.append("absolute is required when path is pre-split")

        try:
            parse_order(self.ellipsis_order)
        except ValueError as e:
            errors.append(str(e))

        if not isinstance(self.sort, bool) and not callable(self.sort):
            errors.append("sort must be a bool or a comparison function")

        if self.derive is not None:
            if isinstance(self.derive, str):
                errors.append("derive must be a list of templates, not a string")
            elif not all(isinstance(t, str) for t in self.derive):
                errors.append("derive templates must be strings")

        for name in ('match', 'exclude'):
            value = getattr(self, name)
            if value is not None and not isinstance(value, (str, re.Pattern)):
                errors.append(f"{name} must be a string or compiled pattern")

        if self.reader is not None and not hasattr(self.reader, 'open_directory'):
            errors.append("reader must implement DirectoryReader")

        if self.error_policy is not None and not hasattr(self.error_policy, 'handle'):
            errors.append("error_policy must implement ErrorPolicy")

        if not callable(self.case_oracle):
            errors.append("case_oracle must be callable")

        return errors


def parse_order(order: Union[EllipsisOrder, str]) -> EllipsisOrder:
    """Parse ellipsis order from string or enum.

    Args:
        order: Order as enum or string

    Returns:
        EllipsisOrder enum value
    """
    if isinstance(order, EllipsisOrder):
        return order

    # Map string names to enum values
    order_map = {
        'normal': EllipsisOrder.NORMAL,
        'pre': EllipsisOrder.NORMAL,
        'breadth-first': EllipsisOrder.BREADTH_FIRST,
        'breadth_first': EllipsisOrder.BREADTH_FIRST,
        'bfs': EllipsisOrder.BREADTH_FIRST,
        'inside-out': EllipsisOrder.INSIDE_OUT,
        'inside_out': EllipsisOrder.INSIDE_OUT,
        'post': EllipsisOrder.INSIDE_OUT,
    }

    order_lower = order.lower() if isinstance(order, str) else str(order)
    if order_lower in order_map:
        return order_map[order_lower]

    raise ValueError(f"Unknown ellipsis order: {order}")
