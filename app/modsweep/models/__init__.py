"""Data models for modsweep.

This module exports the archive library and modlist manifest models.
"""

from modsweep.models.archive import (
    ArchiveFile,
    ClassificationResult,
    DeletionOutcome,
    DuplicateGroup,
    FolderStats,
    GroupingResult,
    LibraryStats,
    OrphanRecord,
)
from modsweep.models.manifest import (
    ArchiveState,
    ManifestInfo,
    ModlistArchive,
    ModlistDescriptor,
)

__all__ = [
    "ArchiveFile",
    "ArchiveState",
    "ClassificationResult",
    "DeletionOutcome",
    "DuplicateGroup",
    "FolderStats",
    "GroupingResult",
    "LibraryStats",
    "ManifestInfo",
    "ModlistArchive",
    "ModlistDescriptor",
    "OrphanRecord",
]
