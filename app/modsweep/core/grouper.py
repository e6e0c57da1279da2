"""Superseded-version detection within a single library folder.

Archives of the same package are grouped by package id, normalized name
and part marker. A group is only offered for cleanup when its ordering is
unambiguous and none of the safety gates suggests that the members are
distinct content variants, independent patches, or re-uploads.
"""

from collections import defaultdict
from collections.abc import Iterable
from itertools import combinations
from pathlib import Path

from modsweep.core.collector import list_files
from modsweep.core.events import EventSink, default_sink
from modsweep.core.filename import decompose, extract_part_marker, is_main_file, normalize_name
from modsweep.models.archive import ArchiveFile, DuplicateGroup, GroupingResult

# Same-version pairs further apart than this size factor are suspicious
MAX_SAME_VERSION_SIZE_RATIO = 10
# Same-version pairs uploaded closer together than this are suspicious
MIN_SAME_VERSION_INTERVAL = 3600
# A patch below this share of an older member's size is incremental
TINY_PATCH_FACTOR = 10

DESCRIPTOR_TAGS: tuple[str, ...] = (
    # Texture resolution
    " 1k",
    " 2k",
    " 4k",
    " 8k",
    "-1k",
    "-2k",
    "-4k",
    "-8k",
    # Body types
    "cbbe",
    "uunp",
    "bhunp",
    "vanilla body",
    "bodyslide",
    # Components
    " armor",
    " weapon",
    " clothes",
    " clothing",
    " hair",
    " gloves",
    " boots",
    " helmet",
    " meshes",
    " textures",
    "-armor",
    "-weapon",
    "-clothes",
    "-hair",
    "-gloves",
    # File types
    " esp ",
    " esm ",
    " esl ",
    "esp-fe",
    "esp only",
    "esm only",
    "loose files",
    " bsa",
    # Compatibility
    " compat",
    "compatibility",
    " aslal",
    "no worldspace",
    "worldspace edit",
    " performance",
    # Editions
    " lite",
    " light",
    " full",
    " extended",
    " complete",
    " basic",
    " standard",
    " deluxe",
    # Clean variants
    " clean",
    " dirty",
    " gross",
    # Optional content
    " optional",
    " addon",
    " add-on",
    " expansion",
)


def group_key(archive: ArchiveFile) -> str:
    """Build the grouping key of an archive.

    The part marker comes from the file name, falling back to the package
    name, so volumes of a multi-part release never group together.
    """
    marker = extract_part_marker(archive.file_name) or extract_part_marker(archive.package_name)
    return f"{archive.package_id}:{normalize_name(archive.package_name)}{marker}"


def descriptor_tags(filename: str) -> frozenset[str]:
    """Return the content-variant tags found in a file name."""
    lower = filename.lower()
    return frozenset(tag for tag in DESCRIPTOR_TAGS if tag in lower)


def has_conflicting_descriptors(first: str, second: str) -> bool:
    """Check whether two file names describe different content variants.

    Names conflict when only one of them carries variant tags, or when
    both carry tags but share none.
    """
    tags_a = descriptor_tags(first)
    tags_b = descriptor_tags(second)
    if bool(tags_a) != bool(tags_b):
        return True
    return bool(tags_a) and tags_a.isdisjoint(tags_b)


def _is_suspicious_same_version(a: ArchiveFile, b: ArchiveFile) -> bool:
    if a.version != b.version:
        return False
    smaller, larger = sorted((a.size_bytes, b.size_bytes))
    if smaller == 0 or larger > smaller * MAX_SAME_VERSION_SIZE_RATIO:
        return True
    return abs(a.timestamp_value - b.timestamp_value) < MIN_SAME_VERSION_INTERVAL


def _sort_key(archive: ArchiveFile) -> tuple[int, str, str]:
    return (archive.timestamp_value, archive.version, archive.file_name)


def _rejection_reason(files: list[ArchiveFile]) -> str | None:
    """Run the safety gates over a sorted group.

    Returns:
        Description of the first failing gate, or None if all pass.
    """
    if len({f.package_id for f in files}) > 1:
        return "members have different package ids"

    for a, b in combinations(files, 2):
        if _is_suspicious_same_version(a, b):
            return f"suspicious re-upload of version '{a.version}'"

    for a, b in combinations(files, 2):
        if has_conflicting_descriptors(a.file_name, b.file_name):
            return "members have conflicting variant descriptors"

    if any(f.is_patch for f in files) and any(is_main_file(f.file_name) for f in files):
        return "contains both patch and main files"

    newest = files[-1]
    if newest.is_patch:
        for older in files[:-1]:
            if newest.size_bytes * TINY_PATCH_FACTOR < older.size_bytes:
                return "newest member is a small patch"

    return None


def group_files(
    files: Iterable[ArchiveFile],
    events: EventSink | None = None,
) -> list[DuplicateGroup]:
    """Group archives of one folder into superseded-version groups.

    Args:
        files: Collected archives of a single folder.
        events: Optional event sink; every discarded group emits an event.

    Returns:
        Groups that passed all safety gates, sorted by key.
    """
    sink = events or default_sink()

    buckets: dict[str, list[ArchiveFile]] = defaultdict(list)
    for archive in files:
        buckets[group_key(archive)].append(archive)

    groups: list[DuplicateGroup] = []
    for key in sorted(buckets):
        members = buckets[key]
        if len(members) < 2:
            continue

        if len({m.timestamp_value for m in members}) < 2:
            sink.info("Skipped group: all files have the same timestamp", group=key)
            continue

        members.sort(key=_sort_key)

        reason = _rejection_reason(members)
        if reason is not None:
            sink.warn("Skipped group", group=key, reason=reason)
            continue

        newest_idx = len(members) - 1
        groups.append(
            DuplicateGroup(
                key=key,
                files=tuple(members),
                newest_idx=newest_idx,
                reclaimable_bytes=sum(m.size_bytes for m in members[:newest_idx]),
            )
        )

    return groups


def group_folder(folder: Path, events: EventSink | None = None) -> GroupingResult:
    """Find superseded archive versions in one folder.

    Grouping never spans folders. Entries that are not recognized
    archives are counted as skipped.

    Args:
        folder: Library folder to inspect.
        events: Optional event sink.

    Returns:
        GroupingResult with the surviving groups and the skipped count.

    Raises:
        FolderReadError: If the folder cannot be listed.
    """
    sink = events or default_sink()
    sink.info("Scanning folder for old versions", path=folder)

    archives: list[ArchiveFile] = []
    skipped = 0
    for entry in list_files(folder):
        archive = decompose(entry.name)
        if archive is None:
            skipped += 1
            continue
        try:
            size = entry.stat().st_size
        except OSError as e:
            sink.warn("Cannot read file size", path=entry.path, error=e)
            skipped += 1
            continue
        archives.append(archive.located(Path(entry.path), size))

    if skipped:
        sink.info("Skipped unrecognized files", path=folder, count=skipped)

    groups = group_files(archives, sink)
    sink.info("Found duplicate groups", path=folder, groups=len(groups))
    return GroupingResult(groups=groups, skipped_count=skipped)
