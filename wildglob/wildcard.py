"""The Wildcard iterator.

``Wildcard`` is the object users hold: it compiles the configuration once,
owns a TraversalEngine, and manages the queue of root specifications
(``append``, ``prepend``, ``reset``, ``close``).

Example:
    >>> wc = Wildcard("src///*.cpp", match=r"^src/(.*)\\.cpp$",
    ...               derive=["src/$1.o", "src/$1.hpp"])
    >>> for source, obj, header in wc:
    ...     print(source, obj, header)
"""

import sys
from typing import Callable, List, Optional, Pattern, Sequence

from .adapters.filesystem import FileSystemReader
from .config import WildcardConfig
from .core.compiler import CompiledSpec, MatchSpec, PathSpec, PatternCompiler
from .core.derive import Deriver
from .core.traverser import TraversalEngine
from .error_policies import ContinueOnErrorsPolicy
from .errors import ConstructionError


class Wildcard:
    """Lazy, resumable expansion of an extended wildcard path.

    ``next()`` returns one result per call: a path string, or a list of
    ``[path, derived...]`` when ``derive`` templates were given. It returns
    None once everything is exhausted, and keeps returning None until
    ``reset()``.
    """

    def __init__(self, path: Optional[PathSpec] = None, **options):
        """Build a wildcard scan.

        Args:
            path: Path string, pre-split component list, or None
            **options: Any WildcardConfig field (absolute, match, derive,
                follow, case_insensitive, exclude, ellipsis_order, sort,
                debug, reader, error_policy, case_oracle)

        Raises:
            ConstructionError: On unknown options or inconsistent settings
            PatternError: On invalid patterns
        """
        try:
            config = WildcardConfig(path=path, **options)
        except TypeError as e:
            raise ConstructionError(f"Invalid option: {e}") from e
        self._configure(config)

    @classmethod
    def from_config(cls, config: WildcardConfig) -> 'Wildcard':
        """Build a wildcard scan from a prepared configuration."""
        wildcard = cls.__new__(cls)
        wildcard._configure(config)
        return wildcard

    def _configure(self, config: WildcardConfig) -> None:
        config_errors = config.validate()
        if config_errors:
            raise ConstructionError(
                f"Invalid configuration: {'; '.join(config_errors)}"
            )

        self.config = config
        self.case_insensitive = config.resolved_case_insensitive()
        self._compiler = PatternCompiler(self.case_insensitive)
        self._spec = self._compiler.compile(
            config.path, config.absolute, config.match, config.follow
        )
        exclude = None
        if config.exclude is not None:
            exclude = self._compiler.compile_match(config.exclude)

        self.error_policy = config.error_policy or ContinueOnErrorsPolicy()
        self._engine = TraversalEngine(
            reader=config.reader or FileSystemReader(),
            compiler=self._compiler,
            order=config.resolved_order(),
            sort=config.sort,
            exclude=exclude,
            deriver=Deriver(config.derive) if config.derive is not None else None,
            error_policy=self.error_policy,
            trace=_make_trace(config.debug),
        )
        self._engine.start(self._spec)

    # Iteration

    def next(self):
        """Return the next result, or None when exhausted."""
        return self._engine.advance()

    def all(self) -> List:
        """Return every remaining result.

        Reads the entire tree before returning; prefer iteration for large
        trees.
        """
        out = []
        while True:
            result = self.next()
            if result is None:
                break
            out.append(result)
        return out

    def __iter__(self) -> 'Wildcard':
        return self

    def __next__(self):
        result = self.next()
        if result is None:
            raise StopIteration
        return result

    # Path queue

    def append(self, path: PathSpec, absolute: Optional[bool] = None,
               follow: Optional[bool] = None) -> None:
        """Queue a path to be expanded after all current work.

        Revives an exhausted scan.
        """
        self._engine.append(self._compile_root(path, absolute, follow))

    def prepend(self, path: PathSpec, absolute: Optional[bool] = None,
                follow: Optional[bool] = None) -> None:
        """Interrupt the current expansion to serve ``path`` first.

        The interrupted expansion resumes where it stopped once ``path`` is
        exhausted. Nested prepends resume last-in, first-out.
        """
        self._engine.prepend(self._compile_root(path, absolute, follow))

    def reset(self) -> None:
        """Restart from the path given at construction.

        Appended and prepended paths are forgotten, errors recorded by the
        error policy are cleared, and directories are re-read.
        """
        reset_errors = getattr(self.error_policy, "reset", None)
        if reset_errors is not None:
            reset_errors()
        self._engine.start(self._spec)

    def close(self) -> None:
        """Release all directory handles. ``next()`` returns None until
        ``reset()``."""
        self._engine.close()

    def _compile_root(self, path: PathSpec, absolute: Optional[bool],
                      follow: Optional[bool]) -> CompiledSpec:
        if follow is None:
            follow = self.config.follow
        return self._compiler.compile(path, absolute, follow=follow)

    # Accessors

    @property
    def match(self) -> Pattern:
        """The whole-path pattern results of the construction path must
        match. May be replaced mid-scan."""
        return self._spec.matcher

    @match.setter
    def match(self, pattern: MatchSpec) -> None:
        self._spec.matcher = self._compiler.compile_match(pattern)

    @property
    def components(self) -> Sequence:
        """Components of the construction path."""
        return self._spec.components

    @property
    def absolute(self) -> bool:
        return self._spec.absolute

    @property
    def errors(self) -> List[dict]:
        """Errors recorded by the error policy, if it records any."""
        return getattr(self.error_policy, 'errors', [])

    @property
    def exhausted(self) -> bool:
        return self._engine.finished

    def __enter__(self) -> 'Wildcard':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Wildcard(path={self.config.path!r}, match={self.match.pattern!r})"


def _make_trace(debug) -> Optional[Callable[[str], None]]:
    """Turn the ``debug`` option into a trace function."""
    if not debug:
        return None
    if debug is True:
        return lambda message: print(message, file=sys.stderr)
    if hasattr(debug, 'write'):
        return lambda message: print(message, file=debug)
    if callable(debug):
        return debug
    return lambda message: print(message, file=sys.stderr)
