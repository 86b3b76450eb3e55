"""
Command line entry point for gitbuild.

    gitbuild [...args]                 build the project
    gitbuild add <remote> [rev] [-d]   add a git dependency, optionally pinned
    gitbuild h|help                    print this help screen
    gitbuild i|install [filter]        recursively install all deps
    gitbuild u|upgrade [filter]        re-resolve the latest revision of all deps
    gitbuild init                      initialize a new project
    gitbuild run <name>                run a specific script
    gitbuild test                      run the pretest, test and posttest scripts
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from gitbuild import __version__
from gitbuild.build_driver import BuildDriver
from gitbuild.dependency_installer import DependencyInstaller
from gitbuild.gitbuild_exceptions import ExternalCommandFailure, GitbuildException
from gitbuild.manifest_models import Manifest, load_manifest
from gitbuild.project_context import ProjectContext

ALIASES = {
    "h": "help",
    "i": "install",
    "u": "upgrade",
}

GLOBAL_FLAGS = {"-v", "--verbose", "--version"}
GLOBAL_VALUE_OPTIONS = {"-C", "--directory"}


class CommandParser(argparse.ArgumentParser):
    """
    ArgumentParser whose usage errors raise GitbuildException instead of
    exiting with status 2.
    """

    def error(self, message: str):
        self.print_usage(sys.stderr)
        raise GitbuildException(f"{self.prog}: {message}")


def _global_parser() -> argparse.ArgumentParser:
    parser = CommandParser(
        prog="gitbuild",
        description="Package manager and build driver for C/C++ projects",
        add_help=False,
    )
    parser.add_argument("-C", "--directory", default=None, help="project root")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--version", action="store_true")
    return parser


def split_global_options(argv: List[str]):
    """
    Split argv into leading gitbuild options and the command with its
    arguments. Everything after the command is left untouched so that compiler
    flags reach the build unchanged.
    """
    index = 0
    while index < len(argv):
        arg = argv[index]
        if arg in GLOBAL_FLAGS:
            index += 1
        elif arg in GLOBAL_VALUE_OPTIONS:
            index += 2
        elif arg.startswith("--directory="):
            index += 1
        else:
            break
    return argv[:index], argv[index:]


def _add_parser() -> argparse.ArgumentParser:
    parser = CommandParser(prog="gitbuild add")
    parser.add_argument("remote")
    parser.add_argument("revision", nargs="?", default=None)
    parser.add_argument("-d", "--dev", action="store_true", help="add to devDependencies")
    return parser


def _filter_parser(name: str) -> argparse.ArgumentParser:
    parser = CommandParser(prog=f"gitbuild {name}")
    parser.add_argument("filter", nargs="?", default=None)
    return parser


def _run_parser() -> argparse.ArgumentParser:
    parser = CommandParser(prog="gitbuild run")
    parser.add_argument("script")
    return parser


def print_help() -> None:
    print(f"\n    gitbuild v{__version__}")
    print(__doc__.split("\n", 2)[2])


def dispatch(context: ProjectContext, command: Optional[str], args: List[str]) -> int:
    """
    Run one command against the project and return the exit status.
    """
    command = ALIASES.get(command, command)
    if command == "help":
        print_help()
        return 0

    driver = BuildDriver(context)
    # help and init are the only commands that work without a manifest
    if command == "init":
        driver.init()
        return 0

    manifest: Manifest = load_manifest(context.manifest_path, hint='Try "gitbuild init"?')

    if command == "add":
        options = _add_parser().parse_args(args)
        driver.add(manifest, options.remote, options.revision, options.dev)
    elif command in ("install", "upgrade"):
        options = _filter_parser(command).parse_args(args)
        DependencyInstaller(context).install(
            manifest, name_filter=options.filter, upgrade=command == "upgrade"
        )
    elif command == "run":
        options = _run_parser().parse_args(args)
        driver.run_script(manifest, options.script)
    elif command == "test":
        driver.test(manifest)
    else:
        extra = ([command] if command else []) + list(args)
        driver.build(manifest, extra)
    return 0


def main(argv: Optional[List[str]] = None, context: Optional[ProjectContext] = None) -> int:
    leading, rest = split_global_options(sys.argv[1:] if argv is None else list(argv))
    command, args = (rest[0], rest[1:]) if rest else (None, [])

    try:
        options = _global_parser().parse_args(leading)
        if options.version:
            print(f"gitbuild {__version__}")
            return 0
        if context is None:
            context = ProjectContext.create(options.directory or os.getcwd())
        level = logging.DEBUG if options.verbose or context.config.debug else logging.INFO
        context.logger.configure_console(level)
        return dispatch(context, command, args)
    except ExternalCommandFailure as e:
        if e.output:
            print(e.output, file=sys.stderr)
        print(f"error: {e.message}", file=sys.stderr)
        return e.exit_status
    except GitbuildException as e:
        print(f"error: {e.message}", file=sys.stderr)
        return e.exit_status


if __name__ == "__main__":
    sys.exit(main())
