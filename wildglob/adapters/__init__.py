"""Filesystem providers for wildglob."""

from .filesystem import FileSystemReader, ScandirCursor, platform_case_insensitive

__all__ = [
    'FileSystemReader',
    'ScandirCursor',
    'platform_case_insensitive',
]
