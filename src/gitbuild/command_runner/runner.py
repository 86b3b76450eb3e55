"""
Synchronous external command execution.

Every external process gitbuild starts (git, the compiler, manifest scripts)
goes through CommandRunner, which never raises: callers get a CommandResult and
decide whether a non-zero status is fatal.
"""

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Union

from gitbuild.gitbuild_logger import GitbuildLogger

Command = Union[str, Sequence[str]]

# Status reported when the executable itself could not be started
COMMAND_NOT_FOUND = 127


@dataclass
class CommandResult:
    """Status and captured output of a finished command."""

    status: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.status == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, trimmed."""
        parts = [p.strip() for p in (self.stdout, self.stderr) if p and p.strip()]
        return "\n".join(parts)


def format_command(command: Command) -> str:
    if isinstance(command, str):
        return command
    return shlex.join(list(command))


class CommandRunner:
    """
    Runs one external command at a time and waits for it to finish.

    A string command runs through the shell, the way manifest scripts are
    written. A sequence runs the executable directly.
    """

    def __init__(self, logger: GitbuildLogger, debug: Optional[bool] = None):
        """
        Args:
            logger: Logger for diagnostic output
            debug: Echo each command line before running it. Defaults to
                whether DEBUG is set in the environment.
        """
        self.logger = logger
        self.debug = bool(os.environ.get("DEBUG")) if debug is None else debug

    def run(
        self,
        command: Command,
        cwd: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> CommandResult:
        """
        Run the command and capture its output.

        Args:
            command: Shell command string or argv sequence
            cwd: Working directory for the process
            env: Extra variables overlaid on the inherited environment

        Returns:
            CommandResult with the exit status and captured output
        """
        if self.debug:
            self.logger.log(format_command(command), logging.INFO)

        proc_env = None
        if env:
            proc_env = dict(os.environ)
            proc_env.update(env)

        try:
            completed = subprocess.run(
                command,
                shell=isinstance(command, str),
                cwd=cwd,
                env=proc_env,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as e:
            self.logger.log(
                f"Unable to start {format_command(command)}: {e}",
                logging.DEBUG,
            )
            return CommandResult(status=COMMAND_NOT_FOUND, stderr=str(e))

        return CommandResult(
            status=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
