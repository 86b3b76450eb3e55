"""
Dependency installer.

Walks the dependency edges of a manifest depth first. Each edge is located,
cloned or updated, pinned or checked out, then its own dependencies are
installed below its vendor directory before its install script runs.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from gitbuild.dependency_installer.report import (
    DependencyState,
    InstallReport,
    InstallStatus,
)
from gitbuild.gitbuild_logger import GitbuildLogger
from gitbuild.manifest_models import (
    WILDCARD_REVISION,
    Manifest,
    load_manifest,
    write_manifest,
)
from gitbuild.project_context import ProjectContext
from gitbuild.remote_locator import RemoteLocation


@dataclass
class _InstallRun:
    """Mutable state shared by one top-level install call."""

    upgrade: bool
    report: InstallReport = field(default_factory=InstallReport)
    # vendor path -> (remote, revision) of every directory synchronized so far
    visited: Dict[str, Tuple[str, str]] = field(default_factory=dict)


class DependencyInstaller:
    """
    Installs the dependency tree of a project.

    Version control failures and unloadable dependency manifests are fatal and
    propagate. A failing install script only affects its own dependency: it is
    logged as a warning, recorded in the report, and installation continues.
    """

    def __init__(self, context: ProjectContext):
        """
        Args:
            context: Project root, configuration and collaborators
        """
        self.context = context
        self.logger: GitbuildLogger = context.logger
        self.locator = context.locator
        self.synchronizer = context.synchronizer
        self.runner = context.runner

    def install(
        self,
        manifest: Optional[Manifest] = None,
        name_filter: Optional[str] = None,
        upgrade: bool = False,
    ) -> InstallReport:
        """
        Install every dependency of the project and persist pinned revisions.

        Args:
            manifest: The project manifest, loaded from the project root if None
            name_filter: Only direct edges whose remote contains this substring
                are processed; their own dependencies are always installed
            upgrade: Resolve the latest revision even for pinned edges

        Returns:
            InstallReport describing every dependency
        """
        if manifest is None:
            manifest = load_manifest(
                self.context.manifest_path, hint='Try "gitbuild init"?'
            )

        run = _InstallRun(upgrade=upgrade)

        if not manifest.dependencies and not manifest.dev_dependencies:
            self.logger.log(
                f"{manifest.name or 'Project'} has no dependencies", logging.INFO
            )

        self._install_edges(
            self.context.root,
            manifest.dependencies,
            run,
            depth=0,
            ancestors=(),
            name_filter=name_filter,
        )

        # devDependencies of the project itself are synchronized and pinned,
        # but their own dependency trees are not followed
        self._install_edges(
            self.context.root,
            manifest.dev_dependencies,
            run,
            depth=0,
            ancestors=(),
            name_filter=name_filter,
            recursive=False,
        )

        write_manifest(manifest, self.context.manifest_path)

        summary = run.report.get_summary()
        self.logger.log(
            f"Install summary: {summary['synced']} synced, "
            f"{summary['hook_failed']} install scripts failed, "
            f"{summary['skipped']} skipped",
            logging.INFO,
        )
        for state in run.report.get_failed_hooks():
            self.logger.log(
                f"Install script failed for {state.remote} ({state.vendor_path})",
                logging.WARNING,
            )
        return run.report

    def _install_edges(
        self,
        root: str,
        edges: Dict[str, str],
        run: _InstallRun,
        depth: int,
        ancestors: Tuple[str, ...],
        name_filter: Optional[str] = None,
        recursive: bool = True,
    ) -> None:
        for remote, specifier in list(edges.items()):
            if name_filter and name_filter not in remote:
                continue
            self._install_edge(
                root, edges, remote, specifier, run, depth, ancestors, recursive
            )

    def _install_edge(
        self,
        root: str,
        edges: Dict[str, str],
        remote: str,
        specifier: str,
        run: _InstallRun,
        depth: int,
        ancestors: Tuple[str, ...],
        recursive: bool,
    ) -> None:
        location = self.locator.locate(root, remote)

        if location.resource_path in ancestors:
            self.logger.log(
                f"Dependency cycle: {location.resource_path} depends on itself "
                f"through {' -> '.join(ancestors)}; not installing it again",
                logging.WARNING,
            )
            run.report.record(
                DependencyState(
                    remote, InstallStatus.SKIPPED_CYCLE, location.vendor_path,
                    specifier, depth,
                )
            )
            return

        if location.vendor_path in run.visited:
            self._skip_visited(edges, remote, specifier, location, run, depth)
            return

        requested = self._requested_revision(specifier, run.upgrade)
        result = self.synchronizer.sync_location(location, requested)
        edges[remote] = result.resolved_revision
        run.visited[result.vendor_path] = (remote, result.resolved_revision)

        state = DependencyState(
            remote,
            InstallStatus.SYNCED,
            result.vendor_path,
            result.resolved_revision,
            depth,
        )

        if recursive:
            dep_manifest = load_manifest(
                os.path.join(result.vendor_path, self.context.config.manifest_name)
            )
            self._install_edges(
                result.vendor_path,
                dep_manifest.dependencies,
                run,
                depth=depth + 1,
                ancestors=ancestors + (location.resource_path,),
            )
            self._run_install_hook(dep_manifest, location, state)

        run.report.record(state)

    def _skip_visited(
        self,
        edges: Dict[str, str],
        remote: str,
        specifier: str,
        location: RemoteLocation,
        run: _InstallRun,
        depth: int,
    ) -> None:
        previous_remote, revision = run.visited[location.vendor_path]
        if previous_remote != remote:
            self.logger.log(
                f"{remote} and {previous_remote} share the vendor directory "
                f"{location.vendor_path}",
                logging.WARNING,
            )
        status = InstallStatus.SKIPPED_DUPLICATE
        if specifier == WILDCARD_REVISION or run.upgrade:
            edges[remote] = revision
        elif not self._same_revision(specifier, revision):
            # The directory stays at the revision synchronized first
            self.logger.log(
                f"{remote} is pinned to {specifier} but {location.vendor_path} "
                f"is already at {revision} for {previous_remote}; "
                f"{specifier} was not checked out",
                logging.WARNING,
            )
            status = InstallStatus.REVISION_CONFLICT
            revision = specifier
        run.report.record(
            DependencyState(
                remote, status, location.vendor_path, revision, depth,
            )
        )

    @staticmethod
    def _same_revision(first: str, second: str) -> bool:
        """Abbreviated and full hashes of one commit compare equal."""
        first, second = first.lower(), second.lower()
        return first.startswith(second) or second.startswith(first)

    @staticmethod
    def _requested_revision(specifier: str, upgrade: bool) -> Optional[str]:
        """
        The revision to ask the synchronizer for, None meaning latest.
        """
        if upgrade or not specifier or specifier == WILDCARD_REVISION:
            return None
        return specifier

    def _run_install_hook(
        self, manifest: Manifest, location: RemoteLocation, state: DependencyState
    ) -> None:
        script = manifest.get_script("install")
        if not script:
            return

        name = manifest.name or location.resource_path
        self.logger.log(f"{name} running install script", logging.INFO)
        self.logger.log(f"> {script}", logging.INFO)

        result = self.runner.run(script, cwd=location.vendor_path)
        if result.output:
            self.logger.log(result.output, logging.INFO)

        if not result.ok:
            self.logger.log(
                f"Install script for {name} exited with status {result.status}, "
                "continuing with the remaining dependencies",
                logging.WARNING,
            )
            state.status = InstallStatus.HOOK_FAILED
            state.error_message = result.output
