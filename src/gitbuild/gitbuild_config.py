"""
Configuration parameters for gitbuild.
"""

import os
import pathlib
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

try:
    import tomllib
except ModuleNotFoundError:
    # Python < 3.11
    import tomli as tomllib

from gitbuild.gitbuild_exceptions import GitbuildException

CONFIG_FILE_NAME = "gitbuild.toml"

# Environment variables that override the config file, and the field they set
ENV_OVERRIDES = {
    "GITBUILD_DEFAULT_HOST": "default_host",
    "GITBUILD_DEFAULT_BRANCH": "default_branch",
    "CXX": "compiler",
}


@dataclass
class GitbuildConfig:
    """
    Configuration parameters
    """

    default_host: str = "github.com"
    default_branch: str = "master"
    deps_dir: str = "deps"
    manifest_name: str = "package.json"
    compiler: str = "c++"
    git_executable: str = "git"
    debug: bool = False

    @classmethod
    def from_dict(cls, env: Dict[str, Any]) -> "GitbuildConfig":
        """
        Create a GitbuildConfig instance from a dictionary, ignoring unknown keys.
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in env.items() if k in known})

    @classmethod
    def load(
        cls,
        project_root: str,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "GitbuildConfig":
        """
        Load configuration with the precedence defaults < gitbuild.toml < environment.

        Args:
            project_root: Directory that may contain a gitbuild.toml file
            environ: Environment mapping, defaults to os.environ

        Raises:
            GitbuildException: If the config file is not valid TOML
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}

        config_path = pathlib.Path(project_root) / CONFIG_FILE_NAME
        if config_path.is_file():
            try:
                with open(config_path, "rb") as f:
                    data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise GitbuildException(f"Invalid config file {config_path}: {e}")
            section = data.get("gitbuild", {})
            if not isinstance(section, dict):
                raise GitbuildException(f"[gitbuild] in {config_path} must be a table")
            values.update(section)

        for env_key, field_name in ENV_OVERRIDES.items():
            if environ.get(env_key):
                values[field_name] = environ[env_key]

        if environ.get("DEBUG"):
            values["debug"] = True

        return cls.from_dict(values)
