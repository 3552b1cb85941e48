"""Exception hierarchy for wildglob.

Configuration problems are raised while a Wildcard is being built, so an
instance either exists fully configured or not at all. Derivation problems
are raised later, when a matched path is turned into derived paths.
"""


class WildcardError(Exception):
    """Base class for all wildglob errors."""
    pass


class ConstructionError(WildcardError):
    """Raised when a Wildcard cannot be built from the given options."""
    pass


class PatternError(ConstructionError):
    """Raised when a path specification or match pattern is invalid."""
    pass


class DerivationError(WildcardError):
    """Raised when a derive template references a missing capture group."""

    def __init__(self, template: str, index: int, groups: int):
        self.template = template
        self.index = index
        self.groups = groups
        super().__init__(
            f"Derive template {template!r} references ${index} but the "
            f"match pattern only has {groups} capture group(s)"
        )
