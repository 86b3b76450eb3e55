"""
Remote locator.

Turns a dependency identifier into the remote URL to clone and the vendor
directory the working copy lives in.
"""

import os
import re
from dataclasses import dataclass
from urllib.parse import urlparse

from gitbuild.gitbuild_exceptions import MalformedRemote

SHORTHAND_RE = re.compile(r"^[^/ :]+/[^/ :]+$")


@dataclass(frozen=True)
class RemoteLocation:
    """
    Where a dependency comes from and where it is materialized.

    Attributes:
        remote: Full remote URL passed to the version control tool
        resource_path: Repository path on the host, e.g. "org/lib"
        vendor_path: Absolute directory of the working copy
    """

    remote: str
    resource_path: str
    vendor_path: str


class RemoteLocator:
    """
    Derives deterministic vendor paths from remote identifiers.
    """

    def __init__(self, default_host: str = "github.com", deps_dir: str = "deps"):
        self.default_host = default_host
        self.deps_dir = deps_dir

    def is_shorthand(self, remote: str) -> bool:
        return bool(SHORTHAND_RE.match(remote))

    def expand(self, remote: str) -> str:
        """
        Expand an owner/repo shorthand to a full URL on the default host.

        Anything that is not shorthand is returned unchanged.
        """
        remote = remote.strip()
        if self.is_shorthand(remote):
            return f"git@{self.default_host}:{remote}"
        return remote

    def resource_path(self, remote: str) -> str:
        """
        Extract the repository path portion of a remote URL.

        Raises:
            MalformedRemote: If the identifier has no scheme or host separator,
                or the path is empty or escapes the vendor directory
        """
        if "://" in remote:
            path = urlparse(remote).path
        elif ":" in remote:
            path = remote.split(":", 1)[1]
        else:
            raise MalformedRemote(remote)

        path = path.strip("/")
        if path.endswith(".git"):
            path = path[: -len(".git")]

        segments = [s for s in path.split("/") if s]
        if not segments or any(s in (".", "..") for s in segments):
            raise MalformedRemote(remote)
        if any(os.sep in s or (os.altsep and os.altsep in s) for s in segments):
            raise MalformedRemote(remote)

        return "/".join(segments)

    def locate(self, root: str, remote: str) -> RemoteLocation:
        """
        Resolve a remote identifier against a working tree root.

        Args:
            root: Directory whose deps directory holds the working copy
            remote: Full remote URL or owner/repo shorthand

        Returns:
            RemoteLocation for the identifier
        """
        full_remote = self.expand(remote)
        resource_path = self.resource_path(full_remote)
        vendor_path = os.path.join(
            os.path.abspath(root), self.deps_dir, *resource_path.split("/")
        )
        return RemoteLocation(
            remote=full_remote,
            resource_path=resource_path,
            vendor_path=vendor_path,
        )
