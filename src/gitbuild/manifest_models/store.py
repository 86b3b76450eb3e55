"""
Reading and writing manifests on disk.
"""

import json
import pathlib
from typing import Union

from pydantic import ValidationError

from gitbuild.gitbuild_exceptions import InvalidManifest, MissingManifest
from gitbuild.manifest_models.manifest import Manifest, Repository

PathLike = Union[str, pathlib.Path]


def load_manifest(path: PathLike, hint: str = "") -> Manifest:
    """
    Load and validate a manifest file.

    Args:
        path: Path to the package.json file
        hint: Extra guidance appended to the missing-manifest message

    Raises:
        MissingManifest: If the file does not exist
        InvalidManifest: If the file is not valid JSON or fails validation
    """
    path = pathlib.Path(path)
    if not path.is_file():
        raise MissingManifest(str(path), hint)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidManifest(str(path), f"line {e.lineno}, column {e.colno}: {e.msg}")

    if not isinstance(data, dict):
        raise InvalidManifest(str(path), "top level must be an object")

    try:
        return Manifest.from_dict(data)
    except ValidationError as e:
        raise InvalidManifest(str(path), str(e))


def write_manifest(manifest: Manifest, path: PathLike) -> None:
    """Write the manifest as two-space indented JSON."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(manifest.to_dict(), f, indent=2)
        f.write("\n")


def default_manifest(remote_url: str = "") -> Manifest:
    """
    The manifest synthesized for a new project.
    """
    return Manifest(
        name="",
        description="",
        repository=Repository(type="git", url=remote_url),
        dependencies={},
        license="MIT",
        scripts={
            "test": "c++ test/index.cxx -o test/index && ./test/index",
            "install": "",
        },
        flags=["-std=c++2a"],
        files=["index.cxx"],
    )
