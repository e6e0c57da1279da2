"""Unit tests for the deletion executor."""

from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from modsweep.core.executor import DeletionExecutor, is_file_locked
from modsweep.core.filename import decompose
from modsweep.models.archive import ArchiveFile, DuplicateGroup, OrphanRecord


class RecordingObserver:
    """Progress observer that keeps every callback."""

    def __init__(self) -> None:
        self.calls: list[tuple[int, int]] = []

    def on_progress(self, done: int, total: int) -> None:
        self.calls.append((done, total))


def _on_disk(folder: Path, make_archive: Any, name: str, size: int = 1000) -> ArchiveFile:
    path = make_archive(folder, name, size=size)
    archive = decompose(name)
    assert archive is not None
    return archive.located(path, size)


def _group(files: list[ArchiveFile]) -> DuplicateGroup:
    return DuplicateGroup(
        key=f"{files[0].package_id}:test",
        files=tuple(files),
        newest_idx=len(files) - 1,
        reclaimable_bytes=sum(f.size_bytes for f in files[:-1]),
    )


@pytest.fixture
def downloads(tmp_path: Path) -> Path:
    """Library folder for the archives under test."""
    folder = tmp_path / "downloads"
    folder.mkdir()
    return folder


class TestDeleteOrphans:
    """Tests for DeletionExecutor.delete_orphans."""

    def test_permanent_delete(self, downloads: Path, make_archive: Any, events: Any) -> None:
        """Archives and their sidecars are removed."""
        archive = _on_disk(downloads, make_archive, "Old-1234-1-0-1500000000.7z", 500)
        archive.meta_path.write_text("[General]")

        outcome = DeletionExecutor(events).delete_orphans([OrphanRecord(file=archive)])

        assert outcome.deleted_count == 1
        assert outcome.bytes_freed == 500
        assert not outcome.failed
        assert not archive.location.exists()
        assert not archive.meta_path.exists()

    def test_backup_moves_file_and_sidecar(
        self, tmp_path: Path, downloads: Path, make_archive: Any, events: Any
    ) -> None:
        """With a backup folder, files are moved and the folder is created."""
        archive = _on_disk(downloads, make_archive, "Old-1234-1-0-1500000000.7z")
        archive.meta_path.write_text("[General]")
        backup = tmp_path / "backup" / "nested"

        outcome = DeletionExecutor(events).delete_orphans([OrphanRecord(file=archive)], backup)

        assert outcome.deleted_count == 1
        assert not archive.location.exists()
        assert (backup / archive.file_name).exists()
        assert (backup / archive.meta_path.name).exists()

    def test_missing_file_skipped(self, downloads: Path, make_archive: Any, events: Any) -> None:
        """A file removed since the scan is skipped; the batch continues."""
        gone = _on_disk(downloads, make_archive, "Gone-1234-1-0-1500000000.7z")
        kept = _on_disk(downloads, make_archive, "Other-5678-1-0-1500000000.7z")
        gone.location.unlink()

        outcome = DeletionExecutor(events).delete_orphans(
            [OrphanRecord(file=gone), OrphanRecord(file=kept)]
        )

        assert outcome.deleted_count == 1
        assert outcome.skipped == [gone.file_name]
        assert outcome.errors == [f"File no longer exists: {gone.location}"]
        assert not kept.location.exists()

    def test_locked_file_skipped(self, downloads: Path, make_archive: Any, events: Any) -> None:
        """A file that cannot be opened for writing is left alone."""
        archive = _on_disk(downloads, make_archive, "Busy-1234-1-0-1500000000.7z")

        with patch("modsweep.core.executor.is_file_locked", return_value=True):
            outcome = DeletionExecutor(events).delete_orphans([OrphanRecord(file=archive)])

        assert outcome.deleted_count == 0
        assert outcome.errors == [f"File is locked: {archive.location}"]
        assert archive.location.exists()

    def test_backup_name_collision_skipped(
        self, tmp_path: Path, make_archive: Any, events: Any
    ) -> None:
        """A file whose name is already in the backup folder stays in place."""
        name = "SkyUI-12604-5-2-1600000000.7z"
        first = _on_disk(tmp_path / "Skyrim", make_archive, name, 10)
        second = _on_disk(tmp_path / "SkyrimSE", make_archive, name, 20)
        backup = tmp_path / "backup"

        outcome = DeletionExecutor(events).delete_orphans(
            [OrphanRecord(file=first), OrphanRecord(file=second)], backup
        )

        assert outcome.deleted_count == 1
        assert outcome.bytes_freed == 10
        assert outcome.skipped == [name]
        assert outcome.errors == [f"Backup already contains {name}"]
        assert (backup / name).stat().st_size == 10
        assert second.location.exists()

    def test_unopenable_path_reported_locked(self, downloads: Path, events: Any) -> None:
        """A path that cannot be opened for writing is treated as locked."""
        name = "Busy-1234-1-0-1500000000.7z"
        (downloads / name).mkdir()
        archive = decompose(name)
        assert archive is not None
        archive = archive.located(downloads / name, 0)

        outcome = DeletionExecutor(events).delete_orphans([OrphanRecord(file=archive)])

        assert outcome.deleted_count == 0
        assert outcome.errors == [f"File is locked: {archive.location}"]
        assert archive.location.exists()

    def test_dry_run_changes_nothing(
        self, tmp_path: Path, downloads: Path, make_archive: Any, events: Any
    ) -> None:
        """A dry run counts files but leaves the disk untouched."""
        archive = _on_disk(downloads, make_archive, "Old-1234-1-0-1500000000.7z", 700)
        backup = tmp_path / "backup"

        outcome = DeletionExecutor(events, dry_run=True).delete_orphans(
            [OrphanRecord(file=archive)], backup
        )

        assert outcome.dry_run
        assert outcome.deleted_count == 1
        assert outcome.bytes_freed == 700
        assert archive.location.exists()
        assert not backup.exists()

    def test_backup_dir_failure_aborts(
        self, tmp_path: Path, downloads: Path, make_archive: Any, events: Any
    ) -> None:
        """An uncreatable backup folder fails the batch before any file."""
        archive = _on_disk(downloads, make_archive, "Old-1234-1-0-1500000000.7z")
        blocker = tmp_path / "blocker"
        blocker.write_text("not a folder")

        outcome = DeletionExecutor(events).delete_orphans(
            [OrphanRecord(file=archive)], blocker / "backup"
        )

        assert outcome.deleted_count == 0
        assert len(outcome.errors) == 1
        assert outcome.errors[0].startswith("Failed to create backup folder")
        assert archive.location.exists()

    def test_observer_called_per_file(
        self, downloads: Path, make_archive: Any, events: Any
    ) -> None:
        """Progress is reported before each file with a 1-based count."""
        records = [
            OrphanRecord(file=_on_disk(downloads, make_archive, f"M{i}-12{i}4-1-1500000000.7z"))
            for i in range(3)
        ]
        observer = RecordingObserver()

        DeletionExecutor(events).delete_orphans(records, observer=observer)

        assert observer.calls == [(1, 3), (2, 3), (3, 3)]


class TestDeleteSuperseded:
    """Tests for DeletionExecutor.delete_superseded."""

    def test_newest_kept(self, downloads: Path, make_archive: Any, events: Any) -> None:
        """Every member but the newest is removed."""
        files = [
            _on_disk(downloads, make_archive, "SkyUI-12604-5-0-1500000000.7z", 100),
            _on_disk(downloads, make_archive, "SkyUI-12604-5-1-1600000000.7z", 200),
            _on_disk(downloads, make_archive, "SkyUI-12604-5-2-1700000000.7z", 300),
        ]

        outcome = DeletionExecutor(events).delete_superseded([_group(files)])

        assert outcome.deleted_count == 2
        assert outcome.bytes_freed == 300
        assert not files[0].location.exists()
        assert not files[1].location.exists()
        assert files[2].location.exists()

    def test_missing_newest_aborts_group(
        self, downloads: Path, make_archive: Any, events: Any
    ) -> None:
        """Older members are kept when the newest member has disappeared."""
        files = [
            _on_disk(downloads, make_archive, "SkyUI-12604-5-0-1500000000.7z"),
            _on_disk(downloads, make_archive, "SkyUI-12604-5-1-1600000000.7z"),
        ]
        files[1].location.unlink()

        outcome = DeletionExecutor(events).delete_superseded([_group(files)])

        assert outcome.deleted_count == 0
        assert outcome.skipped == [files[0].file_name]
        assert outcome.errors[0].startswith(f"Safety check failed for {files[0].file_name}")
        assert files[0].location.exists()
        assert len(events.errors) == 1

    def test_min_size_filter(self, downloads: Path, make_archive: Any, events: Any) -> None:
        """Superseded files below the minimum size are not counted or touched."""
        files = [
            _on_disk(downloads, make_archive, "SkyUI-12604-5-0-1500000000.7z", 10),
            _on_disk(downloads, make_archive, "SkyUI-12604-5-1-1600000000.7z", 5000),
            _on_disk(downloads, make_archive, "SkyUI-12604-5-2-1700000000.7z", 5000),
        ]
        observer = RecordingObserver()

        outcome = DeletionExecutor(events).delete_superseded(
            [_group(files)], observer=observer, min_size_bytes=1000
        )

        assert outcome.deleted_count == 1
        assert outcome.bytes_freed == 5000
        assert observer.calls == [(1, 1)]
        assert files[0].location.exists()
        assert not files[1].location.exists()


class TestIsFileLocked:
    """Tests for is_file_locked function."""

    def test_writable_file(self, tmp_path: Path) -> None:
        """A regular file is not locked."""
        path = tmp_path / "a.7z"
        path.write_bytes(b"x")

        assert not is_file_locked(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        """A file that cannot be opened counts as locked."""
        assert is_file_locked(tmp_path / "missing.7z")

    def test_directory(self, tmp_path: Path) -> None:
        """A directory cannot be opened for reading and writing."""
        assert is_file_locked(tmp_path)
