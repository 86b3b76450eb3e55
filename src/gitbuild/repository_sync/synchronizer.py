"""
Repository synchronizer.

Clones or updates the vendor directory of one dependency and either checks out
the pinned revision or resolves the revision to pin.
"""

import logging
import os
import re
from dataclasses import dataclass
from typing import Optional

from gitbuild.command_runner import CommandResult
from gitbuild.gitbuild_exceptions import ExternalCommandFailure
from gitbuild.gitbuild_logger import GitbuildLogger
from gitbuild.remote_locator import RemoteLocation, RemoteLocator
from gitbuild.repository_sync.vcs import VersionControl

# Length of the abbreviated commit hash recorded in manifests
SHORT_HASH_LENGTH = 8

HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


class SyncAction:
    """How the vendor directory was brought up to date."""

    CLONED = "cloned"
    UPDATED = "updated"


@dataclass(frozen=True)
class SyncResult:
    """
    Result of synchronizing one dependency.

    Attributes:
        resolved_revision: Revision to record in the manifest
        vendor_path: Directory holding the working copy
        action: SyncAction.CLONED or SyncAction.UPDATED
        checked_out: Whether an explicit revision was checked out
    """

    resolved_revision: str
    vendor_path: str
    action: str
    checked_out: bool = False


class RepositorySynchronizer:
    """
    Brings a vendor directory to the requested revision.

    Any failing version control command is fatal: it raises
    ExternalCommandFailure with the command's status and output, and nothing is
    retried.
    """

    def __init__(
        self,
        vcs: VersionControl,
        locator: RemoteLocator,
        logger: GitbuildLogger,
        default_branch: str = "master",
    ):
        """
        Args:
            vcs: Version control implementation
            locator: Maps remote identifiers to vendor paths
            logger: Logger for progress messages
            default_branch: Branch pulled when updating an existing checkout
        """
        self.vcs = vcs
        self.locator = locator
        self.logger = logger
        self.default_branch = default_branch

    def sync(
        self, root: str, remote: str, revision: Optional[str] = None
    ) -> SyncResult:
        """
        Synchronize one dependency below root.

        Args:
            root: Working tree whose deps directory receives the dependency
            remote: Remote identifier
            revision: Commit to check out, or None to resolve the current HEAD

        Returns:
            SyncResult with the revision to pin and the vendor path
        """
        location = self.locator.locate(root, remote)
        return self.sync_location(location, revision)

    def sync_location(
        self, location: RemoteLocation, revision: Optional[str] = None
    ) -> SyncResult:
        target = location.vendor_path

        # Existence of the directory alone decides clone vs. update
        if os.path.exists(target):
            self.logger.log(f"Updating {location.resource_path}...", logging.INFO)
            self._check(
                self.vcs.update(target, self.default_branch),
                f"pull --rebase origin {self.default_branch}",
            )
            action = SyncAction.UPDATED
        else:
            self.logger.log(f"Fetching {location.resource_path}...", logging.INFO)
            os.makedirs(os.path.dirname(target), exist_ok=True)
            self._check(
                self.vcs.clone(location.remote, target),
                f"clone {location.remote} {target}",
            )
            action = SyncAction.CLONED

        if revision:
            self.logger.log(f"Checking out {revision}", logging.INFO)
            self._check(self.vcs.checkout(target, revision), f"checkout {revision}")
            return SyncResult(
                resolved_revision=revision,
                vendor_path=target,
                action=action,
                checked_out=True,
            )

        result = self._check(self.vcs.resolve_head(target), "rev-parse --verify HEAD")
        head = self._parse_head(result)
        self.logger.log(f"Updated dependency to {head}", logging.INFO)
        return SyncResult(
            resolved_revision=head[:SHORT_HASH_LENGTH],
            vendor_path=target,
            action=action,
        )

    def _check(self, result: CommandResult, description: str) -> CommandResult:
        if not result.ok:
            raise ExternalCommandFailure(description, result.status, result.output)
        return result

    @staticmethod
    def _parse_head(result: CommandResult) -> str:
        for line in result.stdout.splitlines():
            line = line.strip()
            if line and HEX_RE.match(line):
                return line
        raise ExternalCommandFailure(
            "rev-parse --verify HEAD",
            1,
            f"Could not read a commit hash from: {result.output}",
        )
