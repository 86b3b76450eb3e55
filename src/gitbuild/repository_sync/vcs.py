"""
Version control capability used by the repository synchronizer.

The synchronizer only needs four operations. GitVersionControl implements them
with the git command line; tests substitute an in-memory implementation.
"""

from typing import Protocol

from gitbuild.command_runner import CommandResult, CommandRunner


class VersionControl(Protocol):
    """The operations needed to materialize and pin a dependency."""

    def clone(self, remote: str, path: str) -> CommandResult:
        ...

    def update(self, path: str, branch: str) -> CommandResult:
        ...

    def checkout(self, path: str, revision: str) -> CommandResult:
        ...

    def resolve_head(self, path: str) -> CommandResult:
        ...


class GitVersionControl:
    """
    VersionControl backed by the git executable.
    """

    def __init__(self, runner: CommandRunner, executable: str = "git"):
        self.runner = runner
        self.executable = executable

    def clone(self, remote: str, path: str) -> CommandResult:
        return self.runner.run([self.executable, "clone", remote, path])

    def update(self, path: str, branch: str) -> CommandResult:
        # Rebase keeps local commits, there is never a hard reset
        return self.runner.run(
            [self.executable, "pull", "--rebase", "origin", branch], cwd=path
        )

    def checkout(self, path: str, revision: str) -> CommandResult:
        return self.runner.run([self.executable, "checkout", revision], cwd=path)

    def resolve_head(self, path: str) -> CommandResult:
        return self.runner.run(
            [self.executable, "rev-parse", "--verify", "HEAD"], cwd=path
        )

    def remote_url(self, path: str) -> CommandResult:
        return self.runner.run(
            [self.executable, "remote", "get-url", "origin"], cwd=path
        )
