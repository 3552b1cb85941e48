"""High-level API for wildglob.

Simple functional interfaces for the common cases. These wrap the
``Wildcard`` object for callers that just want results.
"""

from typing import Any, Iterator, List

from .core.compiler import PathSpec
from .wildcard import Wildcard


def expand_wildcard(path: PathSpec, **options) -> Iterator[Any]:
    """Simple interface for wildcard expansion.

    Directory handles are released when the generator is exhausted or
    closed, so breaking out of the loop early is safe.

    Args:
        path: Wildcard path specification
        **options: Any Wildcard option (match, derive, follow, sort, ...)

    Yields:
        Matching paths, or ``[path, derived...]`` lists with ``derive``

    Example:
        >>> for core in expand_wildcard("/home/me///core"):
        ...     print(core)
    """
    wildcard = Wildcard(path, **options)
    try:
        yield from wildcard
    finally:
        wildcard.close()


def collect_matches(path: PathSpec, **options) -> List[Any]:
    """Expand a wildcard and return all results as a list.

    Args:
        path: Wildcard path specification
        **options: Any Wildcard option

    Returns:
        List of results in traversal order

    Example:
        >>> sources = collect_matches("src///*.c", sort=True)
    """
    with Wildcard(path, **options) as wildcard:
        return wildcard.all()


def count_matches(path: PathSpec, **options) -> int:
    """Count the results of a wildcard expansion.

    Args:
        path: Wildcard path specification
        **options: Any Wildcard option

    Returns:
        Number of matching paths
    """
    count = 0
    for _ in expand_wildcard(path, **options):
        count += 1
    return count
