"""
Shared fixtures for gitbuild tests.

FakeVersionControl stands in for git: it materializes repositories from an
in-memory registry so installs run against temporary trees without network
access.
"""

import hashlib
import json
import logging
import os
from typing import Dict, List, Optional, Tuple

import pytest

from gitbuild.command_runner import CommandResult
from gitbuild.gitbuild_config import GitbuildConfig
from gitbuild.gitbuild_logger import LOGGER_NAME, GitbuildLogger
from gitbuild.project_context import ProjectContext


class FakeRepo:
    """A remote repository: an ordered list of (full hash, files) commits."""

    def __init__(self, remote: str):
        self.remote = remote
        self.commits: List[Tuple[str, Dict[str, str]]] = []

    def commit(self, files: Dict[str, str]) -> str:
        digest = hashlib.sha1(f"{self.remote}:{len(self.commits)}".encode()).hexdigest()
        self.commits.append((digest, dict(files)))
        return digest

    @property
    def head(self) -> str:
        return self.commits[-1][0]

    def find(self, revision: str) -> Optional[Tuple[str, Dict[str, str]]]:
        for digest, files in self.commits:
            if digest.startswith(revision):
                return digest, files
        return None


class FakeVersionControl:
    """
    VersionControl over FakeRepo objects.

    Every call is recorded in `calls` as (operation, path).
    """

    def __init__(self) -> None:
        self.repos: Dict[str, FakeRepo] = {}
        self.checked_out: Dict[str, str] = {}
        self.remotes: Dict[str, str] = {}
        self.calls: List[Tuple[str, str]] = []

    def add_package(
        self,
        remote: str,
        name: str = "",
        dependencies: Optional[Dict[str, str]] = None,
        scripts: Optional[Dict[str, str]] = None,
        files: Optional[List[str]] = None,
        extra_files: Optional[Dict[str, str]] = None,
        manifest: bool = True,
    ) -> str:
        """Commit a new revision of a package and return its full hash."""
        repo = self.repos.setdefault(remote, FakeRepo(remote))
        contents = dict(extra_files or {})
        if manifest:
            contents["package.json"] = json.dumps(
                {
                    "name": name or remote.rsplit("/", 1)[-1],
                    "dependencies": dependencies or {},
                    "scripts": scripts or {},
                    "files": files or [],
                }
            )
        return repo.commit(contents)

    def _materialize(self, path: str, files: Dict[str, str]) -> None:
        for rel, content in files.items():
            target = os.path.join(path, rel)
            os.makedirs(os.path.dirname(target), exist_ok=True)
            with open(target, "w") as f:
                f.write(content)

    def clone(self, remote: str, path: str) -> CommandResult:
        self.calls.append(("clone", path))
        repo = self.repos.get(remote)
        if repo is None:
            return CommandResult(128, stderr=f"fatal: repository '{remote}' not found")
        os.makedirs(path)
        self._materialize(path, repo.commits[-1][1])
        self.checked_out[path] = repo.head
        self.remotes[path] = remote
        return CommandResult(0, stderr=f"Cloning into '{path}'...")

    def update(self, path: str, branch: str) -> CommandResult:
        self.calls.append(("update", path))
        repo = self.repos[self.remotes[path]]
        self._materialize(path, repo.commits[-1][1])
        self.checked_out[path] = repo.head
        return CommandResult(0, stdout="Already up to date.")

    def checkout(self, path: str, revision: str) -> CommandResult:
        self.calls.append(("checkout", path))
        found = self.repos[self.remotes[path]].find(revision)
        if found is None:
            return CommandResult(
                1, stderr=f"error: pathspec '{revision}' did not match any file(s) known to git"
            )
        digest, files = found
        self._materialize(path, files)
        self.checked_out[path] = digest
        return CommandResult(0, stderr=f"HEAD is now at {digest[:7]}")

    def resolve_head(self, path: str) -> CommandResult:
        self.calls.append(("resolve_head", path))
        return CommandResult(0, stdout=self.checked_out[path] + "\n")

    def operations(self) -> List[str]:
        return [op for op, _ in self.calls]


class FakeRunner:
    """Command runner that records commands and returns canned results."""

    def __init__(self) -> None:
        self.commands: List[Tuple[object, Optional[str]]] = []
        self.results: Dict[str, CommandResult] = {}

    def run(self, command, cwd=None, env=None) -> CommandResult:
        self.commands.append((command, cwd))
        key = command if isinstance(command, str) else " ".join(command)
        for prefix, result in self.results.items():
            if key.startswith(prefix):
                return result
        return CommandResult(0, stdout="")


@pytest.fixture(autouse=True)
def reset_gitbuild_logger():
    """Drop console handlers attached by the command line entry point."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def fake_vcs():
    return FakeVersionControl()


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def context(tmp_path, fake_vcs, fake_runner):
    """A project context rooted in a temporary directory."""
    return ProjectContext(
        root=str(tmp_path),
        config=GitbuildConfig(),
        logger=GitbuildLogger(),
        runner=fake_runner,
        vcs=fake_vcs,
    )


def write_json(path, data) -> None:
    os.makedirs(os.path.dirname(str(path)), exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f)


def read_json(path):
    with open(path) as f:
        return json.load(f)
