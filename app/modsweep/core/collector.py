"""Library folder discovery and archive collection.

A library root is either the parent of one folder per game or a single
game folder itself. Folders are listed independently and in parallel;
nothing is shared between workers except the immutable inputs.
"""

import os
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from modsweep.core.errors import FolderReadError
from modsweep.core.events import EventSink, default_sink
from modsweep.core.filename import decompose, is_archive_candidate
from modsweep.models.archive import ArchiveFile, FolderStats, LibraryStats


def _is_hidden(name: str) -> bool:
    return name.startswith(".") or name.startswith("__")


def list_files(folder: Path) -> list[os.DirEntry[str]]:
    """List non-directory entries of a folder.

    Raises:
        FolderReadError: If the folder cannot be listed.
    """
    try:
        with os.scandir(folder) as it:
            entries = list(it)
    except OSError as e:
        raise FolderReadError(folder, e) from e

    files: list[os.DirEntry[str]] = []
    for entry in entries:
        try:
            if entry.is_dir():
                continue
        except OSError:
            continue
        files.append(entry)
    return sorted(files, key=lambda e: e.name)


def list_candidate_folders(root: Path, events: EventSink | None = None) -> list[Path]:
    """List the folders of a library that may hold archives.

    The root itself is included when it directly contains archive
    candidates, so both "parent of all game folders" and "one game
    folder" selections work. Every non-hidden immediate subdirectory
    is included as well.

    Args:
        root: Library root selected by the user.
        events: Optional event sink.

    Returns:
        Candidate folders sorted by path.

    Raises:
        FolderReadError: If the root cannot be listed.
    """
    sink = events or default_sink()

    try:
        with os.scandir(root) as it:
            entries = list(it)
    except OSError as e:
        raise FolderReadError(root, e) from e

    folders: list[Path] = []
    has_archives = False
    for entry in entries:
        try:
            is_dir = entry.is_dir()
        except OSError:
            continue
        if is_dir:
            if not _is_hidden(entry.name):
                folders.append(Path(entry.path))
        elif is_archive_candidate(entry.name):
            has_archives = True

    if has_archives:
        sink.info("Selected directory contains archives, including it", path=root)
        folders.append(root)

    return sorted(folders)


def _collect_entry(entry: os.DirEntry[str]) -> ArchiveFile | None:
    archive = decompose(entry.name)
    if archive is None:
        return None
    try:
        size = entry.stat().st_size
    except OSError:
        return None
    return archive.located(Path(entry.path), size)


def collect_folder(folder: Path) -> list[ArchiveFile]:
    """Collect recognized archives from a single folder.

    Args:
        folder: Folder to list (not recursive).

    Returns:
        Archives with location and size attached, sorted by file name.

    Raises:
        FolderReadError: If the folder cannot be listed.
    """
    archives = (_collect_entry(entry) for entry in list_files(folder))
    return sorted((a for a in archives if a is not None), key=lambda a: a.file_name)


def collect(
    folders: Iterable[Path],
    events: EventSink | None = None,
    max_workers: int | None = None,
) -> list[ArchiveFile]:
    """Collect recognized archives from several folders in parallel.

    A folder that cannot be read contributes no files and emits a warning;
    the other folders are unaffected.

    Args:
        folders: Folders to collect from.
        events: Optional event sink.
        max_workers: Thread pool size (None lets the executor decide).

    Returns:
        Archives from all readable folders.
    """
    sink = events or default_sink()
    folder_list = list(folders)

    def _safe_collect(folder: Path) -> list[ArchiveFile]:
        try:
            return collect_folder(folder)
        except FolderReadError as e:
            sink.warn("Failed to read folder", path=e.path, error=e.cause)
            return []

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        results = list(pool.map(_safe_collect, folder_list))

    archives = [archive for batch in results for archive in batch]
    sink.info("Collected archives", folders=len(folder_list), files=len(archives))
    return archives


def _folder_stats(folder: Path) -> FolderStats:
    count = 0
    size = 0
    try:
        entries = list_files(folder)
    except FolderReadError:
        entries = []

    for entry in entries:
        if not is_archive_candidate(entry.name):
            continue
        try:
            size += entry.stat().st_size
        except OSError:
            continue
        count += 1

    return FolderStats(name=folder.name or str(folder), file_count=count, size_bytes=size)


def library_stats(folders: Iterable[Path], max_workers: int | None = None) -> LibraryStats:
    """Count archive candidates and their size per folder.

    Unlike :func:`collect`, any file with an archive extension counts,
    whether or not its name follows the download convention.

    Args:
        folders: Folders to measure.
        max_workers: Thread pool size (None lets the executor decide).

    Returns:
        LibraryStats with one row per non-empty folder, sorted by name.
    """
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        rows = list(pool.map(_folder_stats, list(folders)))

    return LibraryStats(
        folders=tuple(sorted((r for r in rows if r.file_count > 0), key=lambda r: r.name))
    )
