"""
Build driver.

Assembles and runs the compiler invocation for a project, and implements the
small manifest commands around it: running scripts, adding dependencies and
initializing a new project.
"""

import logging
import os
from typing import List, Optional, Sequence

from gitbuild.command_runner import CommandResult, format_command
from gitbuild.gitbuild_exceptions import ExternalCommandFailure, GitbuildException
from gitbuild.manifest_models import (
    WILDCARD_REVISION,
    Manifest,
    default_manifest,
    write_manifest,
)
from gitbuild.project_context import ProjectContext
from gitbuild.source_collector import SourceCollector, SourceSet

INCLUDE_FLAG = "-I"


class BuildDriver:
    """
    Runs builds and scripts for the project described by a ProjectContext.
    """

    def __init__(self, context: ProjectContext):
        self.context = context
        self.logger = context.logger
        self.runner = context.runner

    def collect_sources(self) -> SourceSet:
        collector = SourceCollector(self.logger, self.context.config.manifest_name)
        return collector.collect(self.context.root)

    def compiler_command(
        self,
        manifest: Manifest,
        source_set: SourceSet,
        extra_args: Sequence[str] = (),
    ) -> List[str]:
        """
        Compiler argv: flags, extra arguments, compilation units, include flags.
        """
        return (
            [self.context.config.compiler]
            + list(manifest.flags)
            + list(extra_args)
            + list(source_set.compilation_units)
            + [INCLUDE_FLAG + d for d in source_set.include_directories]
        )

    def build(self, manifest: Manifest, extra_args: Sequence[str] = ()) -> CommandResult:
        """
        Compile the project and all vendored dependencies in one invocation.

        Raises:
            ExternalCommandFailure: If the compiler exits with a non-zero status
        """
        source_set = self.collect_sources()
        command = self.compiler_command(manifest, source_set, extra_args)
        result = self.runner.run(command, cwd=self.context.root)
        if not result.ok:
            raise ExternalCommandFailure(format_command(command), result.status, result.output)

        if result.output:
            self.logger.log(result.output, logging.INFO)
        self.logger.log("OK build", logging.INFO)
        return result

    def run_script(self, manifest: Manifest, name: str) -> CommandResult:
        """
        Run a named manifest script in the project root.

        Raises:
            GitbuildException: If the manifest has no such script
            ExternalCommandFailure: If the script exits with a non-zero status
        """
        script = manifest.get_script(name)
        if script is None:
            raise GitbuildException(f'No script named "{name}" in {self.context.manifest_path}')

        result = self.runner.run(script, cwd=self.context.root)
        if result.output:
            self.logger.log(result.output, logging.INFO)
        if not result.ok:
            raise ExternalCommandFailure(script, result.status, result.output)
        return result

    def test(self, manifest: Manifest) -> None:
        """
        Run pretest, test and posttest, stopping at the first failure.
        """
        if manifest.get_script("test") is None:
            raise GitbuildException(f"No test script in {self.context.manifest_path}")

        for name in ("pretest", "test", "posttest"):
            if manifest.get_script(name) is not None:
                self.run_script(manifest, name)

    def add(
        self,
        manifest: Manifest,
        remote: str,
        revision: Optional[str] = None,
        dev: bool = False,
    ) -> str:
        """
        Record a dependency edge and write the manifest.

        Returns:
            The remote as recorded, with shorthand expanded
        """
        locator = self.context.locator
        remote = locator.expand(remote)
        # Validates the identifier before it is written
        locator.resource_path(remote)

        manifest.get_edges(dev)[remote] = revision or WILDCARD_REVISION
        write_manifest(manifest, self.context.manifest_path)
        self.logger.log(
            f"Added {remote} at {revision or WILDCARD_REVISION}"
            + (" to devDependencies" if dev else ""),
            logging.INFO,
        )
        return remote

    def init(self) -> Optional[Manifest]:
        """
        Write a default manifest unless one exists, and create the deps directory.
        """
        manifest_path = self.context.manifest_path
        manifest = None
        if not os.path.exists(manifest_path):
            manifest = default_manifest(self._origin_url())
            write_manifest(manifest, manifest_path)
            self.logger.log(f"Wrote {manifest_path}", logging.INFO)

        os.makedirs(self.context.deps_path, exist_ok=True)
        return manifest

    def _origin_url(self) -> str:
        vcs = self.context.vcs
        if not hasattr(vcs, "remote_url"):
            return ""
        result = vcs.remote_url(self.context.root)
        return result.stdout.strip() if result.ok else ""
