"""Unit tests for archive data models."""

from pathlib import Path

import pytest
from modsweep.models.archive import (
    ArchiveFile,
    DeletionOutcome,
    DuplicateGroup,
    FolderStats,
    GroupingResult,
    LibraryStats,
)


def _archive(timestamp: str, size: int = 100, variant_id: str | None = None) -> ArchiveFile:
    name = f"Mod-1234-1-{timestamp}.7z"
    return ArchiveFile(
        file_name=name,
        package_name="Mod",
        package_id="1234",
        version="1",
        timestamp=timestamp,
        variant_id=variant_id,
        location=Path("/downloads") / name,
        size_bytes=size,
    )


class TestArchiveFile:
    """Tests for ArchiveFile dataclass."""

    def test_compound_key(self) -> None:
        """The compound key needs a variant id."""
        assert _archive("1500000000").compound_key is None
        assert _archive("1500000000", variant_id="56789").compound_key == "1234-56789"

    def test_timestamp_value(self) -> None:
        """Timestamps compare numerically."""
        assert _archive("1500000000").timestamp_value == 1500000000

    def test_meta_path(self) -> None:
        """The sidecar sits next to the archive."""
        archive = _archive("1500000000")

        assert archive.meta_path == Path("/downloads/Mod-1234-1-1500000000.7z.meta")

    def test_located(self) -> None:
        """located returns a copy with location and size."""
        archive = _archive("1500000000")

        moved = archive.located(Path("/other/x.7z"), 42)

        assert moved.location == Path("/other/x.7z")
        assert moved.size_bytes == 42
        assert archive.size_bytes == 100


class TestDuplicateGroup:
    """Tests for DuplicateGroup validation and accessors."""

    def test_valid_group(self) -> None:
        """newest and superseded split the members."""
        files = (_archive("1500000000"), _archive("1600000000"), _archive("1700000000"))

        group = DuplicateGroup(key="1234:Mod", files=files, newest_idx=2, reclaimable_bytes=200)

        assert group.newest is files[2]
        assert group.superseded == files[:2]

    def test_single_file_rejected(self) -> None:
        """Groups need at least two members."""
        with pytest.raises(ValueError, match="at least 2 files"):
            DuplicateGroup(
                key="1234:Mod", files=(_archive("1500000000"),), newest_idx=0, reclaimable_bytes=0
            )

    def test_newest_must_be_last(self) -> None:
        """The newest member is always the last one."""
        files = (_archive("1500000000"), _archive("1600000000"))

        with pytest.raises(ValueError, match="Newest index"):
            DuplicateGroup(key="1234:Mod", files=files, newest_idx=0, reclaimable_bytes=100)


class TestAggregates:
    """Tests for result totals."""

    def test_grouping_result_totals(self) -> None:
        """Totals count superseded files and reclaimable bytes."""
        group = DuplicateGroup(
            key="1234:Mod",
            files=(_archive("1500000000", 10), _archive("1600000000", 20), _archive("1700000000")),
            newest_idx=2,
            reclaimable_bytes=30,
        )

        result = GroupingResult(groups=[group, group])

        assert result.total_files == 4
        assert result.total_bytes == 60
        assert result.skipped_count == 0

    def test_library_stats_totals(self) -> None:
        """Library totals sum the folder rows."""
        stats = LibraryStats(
            folders=(FolderStats("Fallout4", 2, 100), FolderStats("Skyrim", 3, 400))
        )

        assert stats.total_files == 5
        assert stats.total_bytes == 500

    def test_deletion_outcome_failed(self) -> None:
        """An outcome fails once it holds an error."""
        outcome = DeletionOutcome()
        assert not outcome.failed

        outcome.errors.append("File is locked: /x")

        assert outcome.failed
