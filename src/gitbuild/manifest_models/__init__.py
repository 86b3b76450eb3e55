"""
Manifest models.

This package provides the Pydantic model for package.json manifests and the
functions that read, write and synthesize them.
"""

from .manifest import Manifest, Repository, WILDCARD_REVISION
from .store import default_manifest, load_manifest, write_manifest

__all__ = [
    "Manifest",
    "Repository",
    "WILDCARD_REVISION",
    "default_manifest",
    "load_manifest",
    "write_manifest",
]
