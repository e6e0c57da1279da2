"""Archive filename decomposition.

Download managers save archives as
``<PackageName>-<PackageId>[-<VariantId>]-<Version...>-<Timestamp>.<ext>``.
This module splits such names into their identity, version and timestamp
parts, and provides the name heuristics used when grouping versions of
the same package.
"""

import re

from modsweep.models.archive import ArchiveFile

ARCHIVE_EXTENSIONS: tuple[str, ...] = (".7z", ".zip", ".rar", ".tar", ".gz", ".exe")

# Incomplete or temporary downloads are never candidates
_PARTIAL_MARKERS: tuple[str, ...] = (".part", ".tmp", ".download")

PATCH_KEYWORDS: tuple[str, ...] = (
    "patch",
    "hotfix",
    "update",
    "fix",
    "- patch",
    "-patch",
    " patch",
    "- hotfix",
    "-hotfix",
    " hotfix",
    "- update",
    "-update",
    " update",
    "- fix",
    "-fix",
    " fix",
)

MAIN_KEYWORDS: tuple[str, ...] = ("main", "full", "complete", "- main", "-main", " main")

MIN_TIMESTAMP_DIGITS = 10
PACKAGE_ID_DIGITS = (3, 6)
MIN_VARIANT_ID_DIGITS = 4
MAX_PART_NUMBER = 20

_DIGITS = frozenset("0123456789")
_VERSION_CHARS = _DIGITS | frozenset(".-_")


def _is_digits(value: str) -> bool:
    """Check that a string is a non-empty run of ASCII decimal digits."""
    return bool(value) and all(c in _DIGITS for c in value)


def _matched_extension(filename: str) -> str | None:
    lower = filename.lower()
    for ext in ARCHIVE_EXTENSIONS:
        if lower.endswith(ext):
            return ext
    return None


def is_archive_candidate(filename: str) -> bool:
    """Check if a file name can be a completed archive download.

    Args:
        filename: Base name of the file.

    Returns:
        True if the name has an archive extension and is not a partial,
        temporary or lock file.
    """
    if _matched_extension(filename) is None:
        return False
    lower = filename.lower()
    if any(marker in lower for marker in _PARTIAL_MARKERS):
        return False
    return not lower.startswith("~")


def is_patch_file(filename: str) -> bool:
    """Check if a file name suggests a patch, hotfix or update."""
    lower = filename.lower()
    return any(keyword in lower for keyword in PATCH_KEYWORDS)


def is_main_file(filename: str) -> bool:
    """Check if a file name suggests a main or full release."""
    lower = filename.lower()
    return any(keyword in lower for keyword in MAIN_KEYWORDS)


def is_version_token(token: str) -> bool:
    """Check if a token looks like a version (``1.0``, ``v2_3``, ``0-18``).

    A single leading ``v``/``V`` is ignored. The rest must consist of
    digits, dots, dashes and underscores, with at least one digit.
    """
    if token[:1] in ("v", "V"):
        token = token[1:]
    if not all(c in _VERSION_CHARS for c in token):
        return False
    return any(c in _DIGITS for c in token)


def normalize_name(name: str) -> str:
    """Strip a trailing version from a package name.

    Tokens are kept up to the first space-separated token that looks like
    a version, so "Interface v1.0" and "Interface v1.2" normalize alike.
    If no token survives, the name is returned unchanged.
    """
    kept: list[str] = []
    for token in name.split(" "):
        if is_version_token(token):
            break
        kept.append(token)

    if not kept:
        return name
    return " ".join(kept)


def _numbered_run_pattern(number: int) -> re.Pattern[str]:
    # "-<n>-" not glued to a preceding word or to a following digit
    return re.compile(rf"(?<![^\W_])-{number}-(?!\d)")


_NUMBERED_RUNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (f"-{n}-", _numbered_run_pattern(n)) for n in range(1, MAX_PART_NUMBER + 1)
)


def extract_part_marker(name: str) -> str:
    """Extract a multi-volume part marker from a name.

    Two families are tried in order. Numbered runs such as ``-2-`` are
    checked for 1..20 and returned literally. Textual forms such as
    ``Part 2``, ``part2``, ``(part 2)``, ``pt2`` and ``pt 2`` are checked
    from 20 down to 1 so that "Part 12" is not read as "Part 1", and are
    returned as ``:part<n>``.

    Args:
        name: File name or package name to inspect.

    Returns:
        The part marker, or an empty string if none is found.
    """
    lower = name.lower()

    for marker, pattern in _NUMBERED_RUNS:
        if pattern.search(lower):
            return marker

    for number in range(MAX_PART_NUMBER, 0, -1):
        forms = (
            f"part {number}",
            f"part{number}",
            f"(part {number})",
            f"pt{number}",
            f"pt {number}",
        )
        if any(form in lower for form in forms):
            return f":part{number}"

    return ""


def decompose(filename: str) -> ArchiveFile | None:
    """Split an archive file name into its identity parts.

    The name without extension is split on ``-``. The last segment must
    be a timestamp of at least 10 digits. The first 3-6 digit segment
    after the leading name segment is the package id; a following segment
    of at least 4 digits (before the timestamp) is the variant id.
    Everything between the ids and the timestamp is the version.

    Args:
        filename: Base name of the archive.

    Returns:
        ArchiveFile without location or size, or None if the name does
        not follow the download convention.
    """
    if not is_archive_candidate(filename):
        return None

    ext = _matched_extension(filename)
    if ext is None:
        return None

    parts = filename[: len(filename) - len(ext)].split("-")
    if len(parts) < 3:
        return None

    timestamp = parts[-1]
    if not _is_digits(timestamp) or len(timestamp) < MIN_TIMESTAMP_DIGITS:
        return None

    last = len(parts) - 1
    min_len, max_len = PACKAGE_ID_DIGITS
    id_index: int | None = None
    for i in range(1, last):
        if _is_digits(parts[i]) and min_len <= len(parts[i]) <= max_len:
            id_index = i
            break

    if id_index is None:
        return None

    variant_id: str | None = None
    version_start = id_index + 1
    if id_index + 1 < last:
        candidate = parts[id_index + 1]
        if _is_digits(candidate) and len(candidate) >= MIN_VARIANT_ID_DIGITS:
            variant_id = candidate
            version_start = id_index + 2

    return ArchiveFile(
        file_name=filename,
        package_name="-".join(parts[:id_index]),
        package_id=parts[id_index],
        variant_id=variant_id,
        version="-".join(parts[version_start:last]),
        timestamp=timestamp,
        is_patch=is_patch_file(filename),
    )
