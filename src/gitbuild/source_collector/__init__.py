"""
Source collection.

This package handles:
1. Walking the project tree and its vendored dependencies
2. Reading the file list of every manifest found
3. Classifying files into compilation units and include directories
"""

from .collector import (
    FileKind,
    HEADER_EXTENSIONS,
    SOURCE_EXTENSIONS,
    SourceCollector,
    SourceSet,
    classify,
)

__all__ = [
    "FileKind",
    "HEADER_EXTENSIONS",
    "SOURCE_EXTENSIONS",
    "SourceCollector",
    "SourceSet",
    "classify",
]
