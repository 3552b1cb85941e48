"""wildglob - Extended wildcard path expansion.

wildglob expands POSIX-style glob paths extended with the ``///`` operator,
which matches zero or more directory levels:

    from wildglob import Wildcard

    for core in Wildcard("/home/me///core"):
        print(core)

Results are produced lazily, one per call, and the scan can be paused,
extended with more paths (``append``/``prepend``), reset or closed at any
point. Captured wildcard text can be used to derive sibling paths:

    wc = Wildcard("src///*.cpp", derive=["obj/$1$2.o"])
"""

__version__ = "0.3.0"

from .wildcard import Wildcard
from .config import WildcardConfig, EllipsisOrder
from .errors import WildcardError, ConstructionError, PatternError, DerivationError
from .error_policies import (
    ErrorPolicy,
    FailFastPolicy,
    ContinueOnErrorsPolicy,
    CollectErrorsPolicy,
    ThresholdPolicy,
)
from .core.reader import DirectoryReader, DirectoryCursor
from .adapters.filesystem import FileSystemReader, platform_case_insensitive
from .api import expand_wildcard, collect_matches, count_matches

__all__ = [
    "__version__",
    # Iterator
    "Wildcard",
    # Config
    "WildcardConfig",
    "EllipsisOrder",
    # Errors
    "WildcardError",
    "ConstructionError",
    "PatternError",
    "DerivationError",
    "ErrorPolicy",
    "FailFastPolicy",
    "ContinueOnErrorsPolicy",
    "CollectErrorsPolicy",
    "ThresholdPolicy",
    # Readers
    "DirectoryReader",
    "DirectoryCursor",
    "FileSystemReader",
    "platform_case_insensitive",
    # API
    "expand_wildcard",
    "collect_matches",
    "count_matches",
]
