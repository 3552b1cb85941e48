"""Testing utilities for wildglob.

This module provides fixtures for building directory trees and observing
scans in tests.
"""

from .fixtures import make_tree, Symlink, RecordingReader

__all__ = ['make_tree', 'Symlink', 'RecordingReader']
