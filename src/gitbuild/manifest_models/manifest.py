"""
Pydantic data models for package.json manifests.

A manifest describes one package: its dependency edges, scripts, compiler
flags and the files it contributes to a build. Unknown keys are kept so that a
manifest survives a read/write cycle unchanged apart from pinned revisions.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

# Revision specifier meaning "resolve to the latest commit"
WILDCARD_REVISION = "*"


class Repository(BaseModel):
    """Where the package itself is hosted."""

    model_config = ConfigDict(extra="allow")

    type: str = Field("git", description="Version control system")
    url: str = Field("", description="Remote URL of the package")


class Manifest(BaseModel):
    """
    A package manifest.

    Dependency maps go from remote identifier to revision specifier, which is
    either the wildcard or a concrete commit hash.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field("", description="Package name")
    description: str = Field("", description="Package description")
    repository: Optional[Union[Repository, str]] = Field(
        None, description="Package repository"
    )
    dependencies: Dict[str, str] = Field(default_factory=dict)
    dev_dependencies: Dict[str, str] = Field(
        default_factory=dict, alias="devDependencies"
    )
    scripts: Dict[str, str] = Field(default_factory=dict)
    flags: List[str] = Field(default_factory=list, description="Ordered compiler flags")
    files: Optional[List[str]] = Field(
        None, description="Relative paths of sources and headers"
    )
    main: Optional[str] = Field(None, description="Legacy single-file entry")

    # Key order of the document this manifest was read from
    _key_order: List[str] = PrivateAttr(default_factory=list)

    def declares_files(self) -> bool:
        """Check whether either form of file list is present."""
        return self.files is not None or self.main is not None

    def declared_files(self) -> List[str]:
        """
        The declared file list, explicit list first, legacy entry otherwise.
        """
        if self.files is not None:
            return list(self.files)
        if self.main is not None:
            return [self.main]
        return []

    def get_script(self, name: str) -> Optional[str]:
        """Get a named script, treating an empty command as absent."""
        script = self.scripts.get(name)
        return script if script else None

    def get_edges(self, dev: bool = False) -> Dict[str, str]:
        return self.dev_dependencies if dev else self.dependencies

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the on-disk dictionary with camelCase aliases.

        Only keys that were read, assigned or filled in are written, and keys
        read from disk keep their original position. The dependencies map is
        always present.
        """
        data = self.model_dump(by_alias=True, exclude_unset=True)
        for name, info in type(self).model_fields.items():
            key = info.alias or name
            if key in data:
                continue
            value = getattr(self, name)
            default = info.get_default(call_default_factory=True)
            if name == "dependencies" or (value is not None and value != default):
                data[key] = self.model_dump(by_alias=True, include={name})[key]

        ordered = {key: data[key] for key in self._key_order if key in data}
        ordered.update((key, value) for key, value in data.items() if key not in ordered)
        return ordered

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Manifest":
        manifest = cls.model_validate(data)
        manifest._key_order = list(data)
        return manifest
