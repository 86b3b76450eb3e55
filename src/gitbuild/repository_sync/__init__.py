"""
Repository synchronization.

This package handles:
1. Cloning a dependency into its vendor directory
2. Updating an existing vendor directory in place
3. Checking out a pinned revision or resolving the revision to pin
"""

from .synchronizer import (
    RepositorySynchronizer,
    SHORT_HASH_LENGTH,
    SyncAction,
    SyncResult,
)
from .vcs import GitVersionControl, VersionControl

__all__ = [
    "GitVersionControl",
    "RepositorySynchronizer",
    "SHORT_HASH_LENGTH",
    "SyncAction",
    "SyncResult",
    "VersionControl",
]
