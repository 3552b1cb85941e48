"""
Error handling policies for wildglob.

Directory listings can fail in the middle of a scan: a directory vanishes,
permissions change, a symlink dangles. The traversal engine hands every such
failure to a policy, which decides whether the branch is silently dropped,
recorded, or the error stops the scan.
"""

import sys
from abc import ABC, abstractmethod
from typing import Any, Dict, List


class ErrorPolicy(ABC):
    """
    Base class for error handling policies.

    A policy either returns (the failing branch yields nothing further and
    traversal continues with its siblings) or raises to stop the scan.
    """

    @abstractmethod
    def handle(self, error: Exception, operation: str, path: str) -> None:
        """
        Handle an error raised while reading the filesystem.

        Args:
            error: The exception that was raised
            operation: Name of the reader operation that failed
                (e.g. 'open_directory')
            path: The path being processed when the error occurred
        """
        pass

    def reset(self) -> None:
        """Forget anything recorded so far. Called when a scan restarts."""
        pass


class FailFastPolicy(ErrorPolicy):
    """
    Policy that immediately re-raises any error, stopping the scan.

    The exception surfaces from ``Wildcard.next()``. Useful when a partial
    listing would be worse than no listing.
    """

    def handle(self, error: Exception, operation: str, path: str) -> None:
        """Re-raise the error immediately."""
        raise error


class CollectErrorsPolicy(ErrorPolicy):
    """
    Policy that collects all errors without output, for batch reporting.
    """

    def __init__(self):
        """Initialize the policy."""
        self.errors: List[Dict[str, Any]] = []
        self.skipped_paths: List[str] = []

    def handle(self, error: Exception, operation: str, path: str) -> None:
        """Record the error and continue."""
        self._record(error, operation, path)

    def _record(self, error: Exception, operation: str, path: str) -> None:
        self.errors.append({
            'path': path,
            'operation': operation,
            'error': error,
            'error_type': type(error).__name__,
            'error_message': str(error)
        })
        if isinstance(error, OSError):
            self.skipped_paths.append(path)

    def reset(self) -> None:
        """Clear recorded errors and skipped paths."""
        self.errors.clear()
        self.skipped_paths.clear()

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        return {
            'total_errors': len(self.errors),
            'permission_errors': sum(1 for e in self.errors if e['error_type'] == 'PermissionError'),
            'not_found_errors': sum(1 for e in self.errors if e['error_type'] == 'FileNotFoundError'),
            'skipped_paths': len(self.skipped_paths),
            'errors': self.errors
        }


class ContinueOnErrorsPolicy(CollectErrorsPolicy):
    """
    Policy that records errors, optionally warns, and continues the scan.

    This is the default: a directory that cannot be opened is treated as an
    empty one.
    """

    def __init__(self, verbose: bool = False):
        """
        Initialize the policy.

        Args:
            verbose: If True, print warnings to stderr when errors occur
        """
        super().__init__()
        self.verbose = verbose

    def handle(self, error: Exception, operation: str, path: str) -> None:
        """Record the error, warn if verbose, and continue."""
        self._record(error, operation, path)

        if self.verbose:
            if isinstance(error, PermissionError):
                print(f"\nWARNING: Skipping inaccessible path '{path}': {error}", file=sys.stderr)
            else:
                print(f"\nWARNING: Error in {operation} for '{path}': {error}", file=sys.stderr)


class ThresholdPolicy(CollectErrorsPolicy):
    """
    Policy that tolerates errors up to a threshold, then fails.

    Useful when a few unreadable directories are expected but many point at
    a wrong root or a permissions problem.
    """

    def __init__(self, max_errors: int = 10, verbose: bool = True):
        """
        Initialize threshold policy.

        Args:
            max_errors: Maximum errors to tolerate before failing
            verbose: If True, print warnings for errors
        """
        super().__init__()
        self.max_errors = max_errors
        self.verbose = verbose

    def handle(self, error: Exception, operation: str, path: str) -> None:
        """Record the error if under threshold, otherwise raise."""
        self._record(error, operation, path)
        count = len(self.errors)

        if count > self.max_errors:
            raise RuntimeError(f"Error threshold exceeded ({self.max_errors} errors)") from error

        if self.verbose:
            print(f"\nWARNING [{count}/{self.max_errors}]: Error in {operation} for '{path}': {error}",
                  file=sys.stderr)
