"""Orphan classification against active modlists.

An archive is used when its package/variant pair appears in any active
modlist, or failing that, when its package id alone does. Literal
archive names are not used for matching.
"""

from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor

from modsweep.core.events import EventSink, default_sink
from modsweep.models.archive import ArchiveFile, ClassificationResult, OrphanRecord
from modsweep.models.manifest import ManifestInfo


def merge_identity_sets(
    manifests: Iterable[ManifestInfo],
) -> tuple[frozenset[str], frozenset[str]]:
    """Union the identity sets of several modlists.

    Args:
        manifests: Active modlists.

    Returns:
        Tuple of (package ids, compound package-variant keys).
    """
    package_ids: set[str] = set()
    compound_ids: set[str] = set()
    for manifest in manifests:
        package_ids |= manifest.package_ids
        compound_ids |= manifest.compound_ids
    return frozenset(package_ids), frozenset(compound_ids)


def is_used(
    archive: ArchiveFile,
    package_ids: frozenset[str],
    compound_ids: frozenset[str],
) -> bool:
    """Check whether an archive is referenced by the merged identity sets."""
    key = archive.compound_key
    if key is not None and key in compound_ids:
        return True
    return archive.package_id in package_ids


def classify(
    files: Sequence[ArchiveFile],
    manifests: Iterable[ManifestInfo],
    events: EventSink | None = None,
    max_workers: int | None = None,
) -> ClassificationResult:
    """Partition archives into used and orphaned.

    Each archive is checked independently against read-only sets, so the
    checks run on a thread pool. Callers must not rely on element order.

    Args:
        files: Collected archives.
        manifests: Active modlists.
        events: Optional event sink.
        max_workers: Thread pool size (None lets the executor decide).

    Returns:
        ClassificationResult with both partitions and their sizes.
    """
    sink = events or default_sink()
    package_ids, compound_ids = merge_identity_sets(manifests)
    sink.info(
        "Merged active modlists",
        package_ids=len(package_ids),
        compound_ids=len(compound_ids),
    )

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        flags = list(pool.map(lambda f: is_used(f, package_ids, compound_ids), files))

    used: list[ArchiveFile] = []
    orphaned: list[OrphanRecord] = []
    for archive, flag in zip(files, flags, strict=True):
        if flag:
            used.append(archive)
        else:
            orphaned.append(OrphanRecord(file=archive))

    result = ClassificationResult(
        used=used,
        orphaned=orphaned,
        used_bytes=sum(f.size_bytes for f in used),
        orphaned_bytes=sum(r.file.size_bytes for r in orphaned),
    )
    sink.info("Classification complete", used=len(used), orphaned=len(orphaned))
    return result
