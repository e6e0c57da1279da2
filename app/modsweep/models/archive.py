"""Archive library domain models.

This module defines the immutable value types produced while scanning a
downloads library: parsed archive files, orphan records, duplicate
version groups, and the results of classification, grouping and deletion.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ArchiveFile:
    """A downloaded archive whose file name follows the download convention.

    Attributes:
        file_name: Base name of the archive on disk.
        location: Full filesystem path (empty path until collected).
        package_name: Name segment(s) preceding the package id.
        package_id: Numeric package id as a string (3-6 digits).
        variant_id: Optional secondary numeric id (4+ digits).
        version: Free-form version tokens joined by "-".
        timestamp: Upload timestamp as a decimal string (10+ digits).
        size_bytes: Size of the archive in bytes.
        is_patch: Whether the name suggests a patch/hotfix/update.
    """

    file_name: str
    package_name: str
    package_id: str
    version: str
    timestamp: str
    variant_id: str | None = None
    location: Path = field(default_factory=Path)
    size_bytes: int = 0
    is_patch: bool = False

    @property
    def compound_key(self) -> str | None:
        """Package id and variant id joined by "-", if a variant id exists."""
        if self.variant_id is None:
            return None
        return f"{self.package_id}-{self.variant_id}"

    @property
    def timestamp_value(self) -> int:
        """Timestamp as an integer for numeric comparison."""
        return int(self.timestamp)

    @property
    def meta_path(self) -> Path:
        """Path of the optional ``.meta`` sidecar next to the archive."""
        return self.location.with_name(f"{self.location.name}.meta")

    def located(self, location: Path, size_bytes: int) -> ArchiveFile:
        """Return a copy attached to an on-disk location and size."""
        return replace(self, location=location, size_bytes=size_bytes)


@dataclass(frozen=True, slots=True)
class OrphanRecord:
    """An archive not referenced by any active modlist."""

    file: ArchiveFile


@dataclass(frozen=True, slots=True)
class ClassificationResult:
    """Partition of collected archives into used and orphaned.

    Attributes:
        used: Archives referenced by at least one active modlist.
        orphaned: Archives referenced by none of them.
        used_bytes: Total size of used archives.
        orphaned_bytes: Total size of orphaned archives.
    """

    used: list[ArchiveFile]
    orphaned: list[OrphanRecord]
    used_bytes: int
    orphaned_bytes: int


@dataclass(frozen=True, slots=True)
class DuplicateGroup:
    """Archives of one package that differ only by version.

    Members are sorted ascending by (timestamp, version); the newest
    member is always the last one and is the one kept.

    Attributes:
        key: Group key "<package_id>:<normalized name><part marker>".
        files: Sorted members of the group.
        newest_idx: Index of the member to keep.
        reclaimable_bytes: Total size of all members except the newest.
    """

    key: str
    files: tuple[ArchiveFile, ...]
    newest_idx: int
    reclaimable_bytes: int

    def __post_init__(self) -> None:
        """Validate group shape after initialization."""
        if len(self.files) < 2:
            msg = f"Duplicate group {self.key} needs at least 2 files"
            raise ValueError(msg)
        if self.newest_idx != len(self.files) - 1:
            msg = f"Newest index must be the last index, got {self.newest_idx}"
            raise ValueError(msg)

    @property
    def newest(self) -> ArchiveFile:
        """The member that is kept."""
        return self.files[self.newest_idx]

    @property
    def superseded(self) -> tuple[ArchiveFile, ...]:
        """Members older than the newest one."""
        return self.files[: self.newest_idx]


@dataclass(frozen=True, slots=True)
class GroupingResult:
    """Duplicate groups found in a single folder.

    Attributes:
        groups: Groups that passed every safety gate, sorted by key.
        skipped_count: Entries that were not recognized archives.
    """

    groups: list[DuplicateGroup]
    skipped_count: int = 0

    @property
    def total_files(self) -> int:
        """Number of superseded files across all groups."""
        return sum(len(g.files) - 1 for g in self.groups)

    @property
    def total_bytes(self) -> int:
        """Reclaimable bytes across all groups."""
        return sum(g.reclaimable_bytes for g in self.groups)


@dataclass(slots=True)
class DeletionOutcome:
    """Accumulated result of one deletion batch.

    Attributes:
        deleted_count: Files removed or moved to the backup directory.
        bytes_freed: Total size of those files.
        skipped: Names of files that could not be processed, in order.
        errors: Human-readable messages, in order.
        dry_run: Whether the batch only simulated deletions.
    """

    deleted_count: int = 0
    bytes_freed: int = 0
    skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    dry_run: bool = False

    @property
    def failed(self) -> bool:
        """Whether any file in the batch failed."""
        return bool(self.errors)


@dataclass(frozen=True, slots=True)
class FolderStats:
    """Archive count and size for one library folder."""

    name: str
    file_count: int
    size_bytes: int


@dataclass(frozen=True, slots=True)
class LibraryStats:
    """Archive counts across a library.

    Attributes:
        folders: Per-folder rows with at least one archive, sorted by name.
    """

    folders: tuple[FolderStats, ...] = ()

    @property
    def total_files(self) -> int:
        """Total archive count."""
        return sum(f.file_count for f in self.folders)

    @property
    def total_bytes(self) -> int:
        """Total archive size."""
        return sum(f.size_bytes for f in self.folders)
