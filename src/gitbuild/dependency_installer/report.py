"""
Install report.

Records what happened to every dependency edge during one install or upgrade
pass.
"""

from typing import Dict, List, Optional


class InstallStatus:
    """Enumeration of dependency install statuses."""

    SYNCED = "synced"
    HOOK_FAILED = "hook_failed"
    SKIPPED_CYCLE = "skipped_cycle"
    SKIPPED_DUPLICATE = "skipped_duplicate"
    REVISION_CONFLICT = "revision_conflict"


class DependencyState:
    """
    State of one dependency after an install pass.
    """

    def __init__(
        self,
        remote: str,
        status: str,
        vendor_path: Optional[str] = None,
        revision: Optional[str] = None,
        depth: int = 0,
        error_message: Optional[str] = None,
    ):
        """
        Initialize dependency state.

        Args:
            remote: Remote identifier of the edge
            status: One of the InstallStatus values
            vendor_path: Directory of the working copy
            revision: Revision recorded for the edge
            depth: Distance from the project being installed, 0 for direct edges
            error_message: Install hook output when the hook failed
        """
        self.remote = remote
        self.status = status
        self.vendor_path = vendor_path
        self.revision = revision
        self.depth = depth
        self.error_message = error_message

    def is_synced(self) -> bool:
        """Check if the working copy is at its recorded revision."""
        return self.status in (InstallStatus.SYNCED, InstallStatus.HOOK_FAILED)

    def __repr__(self) -> str:
        return (
            f"DependencyState(remote={self.remote}, "
            f"status={self.status}, revision={self.revision})"
        )


class InstallReport:
    """
    Collects dependency states in the order they completed.
    """

    def __init__(self) -> None:
        self.states: List[DependencyState] = []

    def record(self, state: DependencyState) -> None:
        self.states.append(state)

    def pinned_revisions(self) -> Dict[str, str]:
        """
        Revisions recorded for the direct edges of the installed project.
        """
        return {
            s.remote: s.revision
            for s in self.states
            if s.depth == 0 and s.revision is not None
        }

    def get_conflicts(self) -> List[DependencyState]:
        return [s for s in self.states if s.status == InstallStatus.REVISION_CONFLICT]

    def get_failed_hooks(self) -> List[DependencyState]:
        return [s for s in self.states if s.status == InstallStatus.HOOK_FAILED]

    def get_summary(self) -> Dict[str, int]:
        """
        Get a summary of install results.

        Returns:
            Dictionary with counts of synced, failed-hook and skipped dependencies
        """
        synced = sum(1 for s in self.states if s.is_synced())
        hook_failed = len(self.get_failed_hooks())
        skipped = sum(
            1
            for s in self.states
            if s.status
            in (
                InstallStatus.SKIPPED_CYCLE,
                InstallStatus.SKIPPED_DUPLICATE,
                InstallStatus.REVISION_CONFLICT,
            )
        )
        return {
            "synced": synced,
            "hook_failed": hook_failed,
            "skipped": skipped,
            "total": len(self.states),
        }
