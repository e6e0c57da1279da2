"""Validated deletion of orphaned and superseded archives.

Deletion is strictly sequential. Every file is re-checked right before
it is touched, files from duplicate groups are re-validated against their
group, and a failure on one file never aborts the batch. With a backup
directory, files are moved instead of deleted.
"""

import shutil
from collections.abc import Sequence
from pathlib import Path

from modsweep.core.events import EventSink, ProgressObserver, default_sink
from modsweep.models.archive import ArchiveFile, DeletionOutcome, DuplicateGroup, OrphanRecord
from modsweep.utils.formatting import format_size


class DeletionFailure(Exception):
    """Raised internally when a single file cannot be removed."""


def is_file_locked(path: Path) -> bool:
    """Check whether a file cannot be opened for reading and writing.

    Args:
        path: File to probe.

    Returns:
        True if the open fails, e.g. because another process holds it.
    """
    try:
        with open(path, "r+b"):
            return False
    except OSError:
        return True


def _move_sidecar(archive: ArchiveFile, backup_dir: Path) -> None:
    meta = archive.meta_path
    if not meta.exists():
        return
    try:
        shutil.move(str(meta), str(backup_dir / meta.name))
    except OSError:
        pass


def _remove_sidecar(archive: ArchiveFile) -> None:
    try:
        archive.meta_path.unlink(missing_ok=True)
    except OSError:
        pass


class DeletionExecutor:
    """Removes archives one at a time with backup-or-permanent semantics.

    Args:
        events: Optional event sink.
        dry_run: If True, validate every file but change nothing on disk.
    """

    def __init__(self, events: EventSink | None = None, dry_run: bool = False) -> None:
        self._events = events or default_sink()
        self._dry_run = dry_run

    def delete_orphans(
        self,
        records: Sequence[OrphanRecord],
        backup_dir: Path | None = None,
        observer: ProgressObserver | None = None,
    ) -> DeletionOutcome:
        """Delete archives no active modlist references.

        Args:
            records: Orphaned archives to remove.
            backup_dir: If given, move files here instead of deleting them.
            observer: Optional progress observer.

        Returns:
            DeletionOutcome for the batch.
        """
        outcome = DeletionOutcome(dry_run=self._dry_run)
        if not self._prepare_backup_dir(backup_dir, outcome):
            return outcome

        total = len(records)
        for done, record in enumerate(records, start=1):
            if observer is not None:
                observer.on_progress(done, total)
            self._process(record.file, backup_dir, outcome)

        self._log_summary(outcome)
        return outcome

    def delete_superseded(
        self,
        groups: Sequence[DuplicateGroup],
        backup_dir: Path | None = None,
        observer: ProgressObserver | None = None,
        min_size_bytes: int = 0,
    ) -> DeletionOutcome:
        """Delete every member of each group except its newest.

        Before each file, its group is re-validated: the file must sit
        before the newest index, and the newest member must still exist.

        Args:
            groups: Duplicate groups that passed the safety gates.
            backup_dir: If given, move files here instead of deleting them.
            observer: Optional progress observer.
            min_size_bytes: Superseded files smaller than this are left alone.

        Returns:
            DeletionOutcome for the batch.
        """
        outcome = DeletionOutcome(dry_run=self._dry_run)

        targets: list[tuple[DuplicateGroup, int]] = []
        for group in groups:
            for index, archive in enumerate(group.superseded):
                if archive.size_bytes < min_size_bytes:
                    self._events.info(
                        "Skipping file below minimum size",
                        file=archive.file_name,
                        size=format_size(archive.size_bytes),
                    )
                    continue
                targets.append((group, index))

        if not self._prepare_backup_dir(backup_dir, outcome):
            return outcome

        total = len(targets)
        for done, (group, index) in enumerate(targets, start=1):
            if observer is not None:
                observer.on_progress(done, total)

            archive = group.files[index]
            problem = self._validate_group_member(group, index)
            if problem is not None:
                self._events.error("Safety check failed", group=group.key, reason=problem)
                outcome.skipped.append(archive.file_name)
                outcome.errors.append(f"Safety check failed for {archive.file_name}: {problem}")
                continue

            self._process(archive, backup_dir, outcome)

        self._log_summary(outcome)
        return outcome

    def _prepare_backup_dir(self, backup_dir: Path | None, outcome: DeletionOutcome) -> bool:
        """Create the backup directory once per batch.

        Returns:
            False if the directory cannot be created.
        """
        if backup_dir is None or self._dry_run:
            return True
        try:
            backup_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            outcome.errors.append(f"Failed to create backup folder {backup_dir}: {e}")
            self._events.error("Failed to create backup folder", path=backup_dir, error=e)
            return False
        self._events.info("Using backup folder", path=backup_dir)
        return True

    @staticmethod
    def _validate_group_member(group: DuplicateGroup, index: int) -> str | None:
        if index >= group.newest_idx:
            return "file is the newest member of its group"
        if not group.newest.location.exists():
            return f"newest file no longer exists: {group.newest.location}"
        return None

    def _process(
        self,
        archive: ArchiveFile,
        backup_dir: Path | None,
        outcome: DeletionOutcome,
    ) -> None:
        try:
            self._remove(archive, backup_dir)
        except DeletionFailure as e:
            self._events.warn("Skipped file", file=archive.file_name, reason=str(e))
            outcome.skipped.append(archive.file_name)
            outcome.errors.append(str(e))
            return

        outcome.deleted_count += 1
        outcome.bytes_freed += archive.size_bytes

    def _remove(self, archive: ArchiveFile, backup_dir: Path | None) -> None:
        """Move or delete one archive and its sidecar.

        Raises:
            DeletionFailure: If the archive is missing or locked, its backup
                name is taken, or it cannot be moved or deleted.
        """
        path = archive.location

        if not path.exists():
            raise DeletionFailure(f"File no longer exists: {path}")
        if is_file_locked(path):
            raise DeletionFailure(f"File is locked: {path}")
        if backup_dir is not None and (backup_dir / archive.file_name).exists():
            raise DeletionFailure(f"Backup already contains {archive.file_name}")

        size = format_size(archive.size_bytes)
        if self._dry_run:
            self._events.info("Dry-run: would remove", file=archive.file_name, size=size)
            return

        if backup_dir is not None:
            try:
                shutil.move(str(path), str(backup_dir / archive.file_name))
            except OSError as e:
                raise DeletionFailure(f"Failed to move {archive.file_name}: {e}") from e
            _move_sidecar(archive, backup_dir)
            self._events.info("Moved to backup", file=archive.file_name, size=size)
            return

        try:
            path.unlink()
        except OSError as e:
            raise DeletionFailure(f"Failed to delete {archive.file_name}: {e}") from e
        _remove_sidecar(archive)
        self._events.info("Deleted", file=archive.file_name, size=size)

    def _log_summary(self, outcome: DeletionOutcome) -> None:
        self._events.info(
            "Deletion complete",
            deleted=outcome.deleted_count,
            freed=format_size(outcome.bytes_freed),
            skipped=len(outcome.skipped),
            dry_run=self._dry_run,
        )
