"""
Source collector.

Walks a project tree, including every vendored dependency, and turns the file
lists of all manifests it finds into compilation units and include directories.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from gitbuild.gitbuild_exceptions import InvalidManifest
from gitbuild.gitbuild_logger import GitbuildLogger
from gitbuild.manifest_models import load_manifest

HIDDEN_PREFIX = "."


class FileKind(Enum):
    """Classification of a declared file by its extension."""

    HEADER = "header"
    SOURCE = "source"
    OTHER = "other"


HEADER_EXTENSIONS = frozenset({".h", ".hh", ".hpp", ".hxx", ".h++", ".inl", ".ipp", ".tpp"})
SOURCE_EXTENSIONS = frozenset({".c", ".cc", ".cpp", ".cxx", ".c++"})


def classify(path: str) -> FileKind:
    ext = os.path.splitext(path)[1].lower()
    if ext in HEADER_EXTENSIONS:
        return FileKind.HEADER
    if ext in SOURCE_EXTENSIONS:
        return FileKind.SOURCE
    return FileKind.OTHER


@dataclass
class SourceSet:
    """
    Inputs of one compiler invocation.

    Attributes:
        compilation_units: Source files in discovery order
        include_directories: Header directories, deduplicated, in first-seen order
    """

    compilation_units: List[str] = field(default_factory=list)
    include_directories: List[str] = field(default_factory=list)

    def add_unit(self, path: str) -> None:
        self.compilation_units.append(path)

    def add_include_directory(self, path: str) -> None:
        if path not in self.include_directories:
            self.include_directories.append(path)


class SourceCollector:
    """
    Collects the source set of a tree.

    Directories are visited pre-order, the manifest of a directory before its
    subdirectories, and entries starting with "." are never entered.
    """

    def __init__(self, logger: GitbuildLogger, manifest_name: str = "package.json"):
        self.logger = logger
        self.manifest_name = manifest_name

    def collect(self, root: str, source_set: Optional[SourceSet] = None) -> SourceSet:
        """
        Collect compilation units and include directories below root.

        Raises:
            InvalidManifest: If a manifest declares neither files nor main
        """
        if source_set is None:
            source_set = SourceSet()

        with os.scandir(root) as it:
            entries = sorted(
                (e for e in it if not e.name.startswith(HIDDEN_PREFIX)),
                key=lambda e: e.name,
            )

        for entry in entries:
            if entry.name == self.manifest_name and entry.is_file():
                self._add_manifest(root, entry.path, source_set)

        for entry in entries:
            # Symlinked directories are not followed
            if entry.is_dir(follow_symlinks=False):
                self.collect(entry.path, source_set)

        return source_set

    def _add_manifest(self, directory: str, manifest_path: str, source_set: SourceSet) -> None:
        manifest = load_manifest(manifest_path)
        if not manifest.declares_files():
            raise InvalidManifest(manifest_path, "package has no files field")

        for declared in manifest.declared_files():
            path = os.path.normpath(os.path.join(directory, declared))
            kind = classify(declared)
            if kind is FileKind.HEADER:
                source_set.add_include_directory(os.path.dirname(path))
            elif kind is FileKind.SOURCE:
                source_set.add_unit(path)
            else:
                self.logger.log(
                    f"Ignoring {path}: not a recognized source or header",
                    logging.DEBUG,
                )
