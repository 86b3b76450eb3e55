"""
The explicit context threaded through every gitbuild operation.

Nothing in gitbuild reads the process working directory on its own: the root of
the project, its configuration and the collaborators used to reach git and the
compiler all travel in a ProjectContext.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from gitbuild.command_runner import CommandRunner
from gitbuild.gitbuild_config import GitbuildConfig
from gitbuild.gitbuild_logger import GitbuildLogger
from gitbuild.remote_locator import RemoteLocator
from gitbuild.repository_sync import (
    GitVersionControl,
    RepositorySynchronizer,
    VersionControl,
)


@dataclass
class ProjectContext:
    """
    Root directory of the project plus everything needed to act on it.
    """

    root: str
    config: GitbuildConfig = field(default_factory=GitbuildConfig)
    logger: GitbuildLogger = field(default_factory=GitbuildLogger)
    runner: Optional[CommandRunner] = None
    vcs: Optional[VersionControl] = None

    def __post_init__(self) -> None:
        self.root = os.path.abspath(self.root)
        if self.runner is None:
            self.runner = CommandRunner(self.logger, debug=self.config.debug or None)
        if self.vcs is None:
            self.vcs = GitVersionControl(self.runner, self.config.git_executable)

    @classmethod
    def create(cls, root: str, **kwargs) -> "ProjectContext":
        """
        Create a context for root, loading gitbuild.toml and environment
        overrides unless a config is given.
        """
        if "config" not in kwargs:
            kwargs["config"] = GitbuildConfig.load(root)
        return cls(root=root, **kwargs)

    @property
    def manifest_path(self) -> str:
        return os.path.join(self.root, self.config.manifest_name)

    @property
    def deps_path(self) -> str:
        return os.path.join(self.root, self.config.deps_dir)

    @property
    def locator(self) -> RemoteLocator:
        return RemoteLocator(self.config.default_host, self.config.deps_dir)

    @property
    def synchronizer(self) -> RepositorySynchronizer:
        return RepositorySynchronizer(
            self.vcs, self.locator, self.logger, self.config.default_branch
        )
