"""Modlist manifest models.

This module defines the Pydantic models for the JSON descriptor stored
inside a modlist container, and the identity sets derived from it.
Unknown fields, including the ``$type`` discriminator, are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class ArchiveState(BaseModel):
    """Source state of one archive referenced by a modlist.

    Attributes:
        mod_id: Package id on the download site.
        file_id: Variant id on the download site.
        game_name: Game the archive belongs to.
        name: Display name of the package.
        version: Version string reported by the download site.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    mod_id: Annotated[int | None, Field(alias="ModID")] = None
    file_id: Annotated[int | None, Field(alias="FileID")] = None
    game_name: Annotated[str | None, Field(alias="GameName")] = None
    name: Annotated[str | None, Field(alias="Name")] = None
    version: Annotated[str | None, Field(alias="Version")] = None


class ModlistArchive(BaseModel):
    """One archive entry of a modlist."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    hash: Annotated[str | None, Field(alias="Hash")] = None
    name: Annotated[str | None, Field(alias="Name")] = None
    size: Annotated[int | None, Field(alias="Size")] = None
    state: Annotated[ArchiveState, Field(alias="State")]


class ModlistDescriptor(BaseModel):
    """Top-level JSON descriptor of a modlist container."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: Annotated[str, Field(alias="Name")]
    version: Annotated[str | None, Field(alias="Version")] = None
    author: Annotated[str | None, Field(alias="Author")] = None
    archives: Annotated[list[ModlistArchive], Field(alias="Archives")]


@dataclass(frozen=True, slots=True)
class ManifestInfo:
    """Identity sets of one modlist, read once and held for the session.

    Attributes:
        path: Location of the modlist container.
        name: Display name of the modlist.
        archive_count: Number of archives the modlist references.
        package_ids: Package ids of referenced archives.
        compound_ids: "<package_id>-<variant_id>" keys of referenced archives.
        archive_names: Literal archive names listed in the modlist.
    """

    path: Path
    name: str
    archive_count: int
    package_ids: frozenset[str] = field(default_factory=frozenset)
    compound_ids: frozenset[str] = field(default_factory=frozenset)
    archive_names: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_descriptor(cls, path: Path, descriptor: ModlistDescriptor) -> ManifestInfo:
        """Derive identity sets from a parsed descriptor.

        Archives without a positive package id contribute no ids; a
        compound key additionally requires a positive variant id.

        Args:
            path: Location of the modlist container.
            descriptor: Parsed modlist JSON.

        Returns:
            ManifestInfo with populated identity sets.
        """
        package_ids: set[str] = set()
        compound_ids: set[str] = set()
        archive_names: set[str] = set()

        for archive in descriptor.archives:
            if archive.name:
                archive_names.add(archive.name)

            mod_id = archive.state.mod_id
            if mod_id is None or mod_id <= 0:
                continue
            package_ids.add(str(mod_id))

            file_id = archive.state.file_id
            if file_id is not None and file_id > 0:
                compound_ids.add(f"{mod_id}-{file_id}")

        return cls(
            path=path,
            name=descriptor.name,
            archive_count=len(descriptor.archives),
            package_ids=frozenset(package_ids),
            compound_ids=frozenset(compound_ids),
            archive_names=frozenset(archive_names),
        )
