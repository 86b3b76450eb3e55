"""
This module contains the exceptions raised by the gitbuild framework.
"""


class GitbuildException(Exception):
    """
    Exceptions raised by the gitbuild framework.

    The command line entry point turns these into an exit status of 1, unless
    the exception carries its own status.
    """

    exit_status = 1

    def __init__(self, message: str):
        """
        Initializes the exception with the given message.
        """
        super().__init__(message)
        self.message = message


class MalformedRemote(GitbuildException):
    """Raised when a remote identifier cannot be turned into a vendor path."""

    def __init__(self, remote: str):
        super().__init__(f"Malformed remote! ({remote})")
        self.remote = remote


class MissingManifest(GitbuildException):
    """Raised when a required manifest file does not exist."""

    def __init__(self, path: str, hint: str = ""):
        message = f"No manifest found at {path}"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)
        self.path = path


class InvalidManifest(GitbuildException):
    """Raised when a manifest exists but cannot be parsed or lacks a file list."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid manifest {path}: {reason}")
        self.path = path
        self.reason = reason


class ExternalCommandFailure(GitbuildException):
    """
    Raised when an external command (git, the compiler, a script) exits with a
    non-zero status on a fail-fast path.

    The captured output is kept verbatim so it can be shown to the user, and the
    process exits with the command's own status.
    """

    def __init__(self, command: str, status: int, output: str = ""):
        super().__init__(f"Command failed with exit status {status}: {command}")
        self.command = command
        self.status = status
        self.output = output

    @property
    def exit_status(self) -> int:
        return self.status if self.status > 0 else 1
