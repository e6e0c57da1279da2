"""Modlist manifest reading.

A modlist is a ZIP container holding a single mandatory member named
``modlist`` with the UTF-8 JSON descriptor. This module opens such
containers, validates the descriptor with Pydantic, and derives the
identity sets used to decide which archives are still referenced.
"""

import json
import zipfile
import zlib
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from modsweep.core.errors import FolderReadError, ModsweepError
from modsweep.core.events import EventSink, default_sink
from modsweep.models.manifest import ManifestInfo, ModlistDescriptor

MANIFEST_SUFFIX = ".wabbajack"
DESCRIPTOR_MEMBER = "modlist"


class ManifestError(ModsweepError):
    """Base exception for manifest-related errors."""


class ManifestParseError(ManifestError):
    """Raised when a modlist container cannot be read or parsed.

    Attributes:
        path: Location of the offending container.
        reason: Short description of what failed.
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


def _read_descriptor_text(path: Path) -> str:
    """Return the decoded text of the ``modlist`` member."""
    if not path.is_file():
        raise ManifestParseError(path, "modlist file not found")

    try:
        with zipfile.ZipFile(path) as container:
            try:
                raw = container.read(DESCRIPTOR_MEMBER)
            except KeyError as e:
                raise ManifestParseError(path, "modlist member not found in container") from e
            except (zlib.error, EOFError, NotImplementedError, RuntimeError) as e:
                raise ManifestParseError(path, f"modlist member is corrupt: {e}") from e
    except zipfile.BadZipFile as e:
        raise ManifestParseError(path, f"not a valid container: {e}") from e
    except OSError as e:
        raise ManifestParseError(path, f"failed to read container: {e}") from e

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ManifestParseError(path, f"modlist member is not UTF-8: {e}") from e


def read_manifest(path: Path, events: EventSink | None = None) -> ManifestInfo:
    """Read a modlist container and derive its identity sets.

    Args:
        path: Path to the modlist container.
        events: Optional event sink.

    Returns:
        ManifestInfo for the modlist.

    Raises:
        ManifestParseError: If the container is missing or unreadable, lacks
            the ``modlist`` member, or holds malformed JSON.
    """
    sink = events or default_sink()
    sink.info("Parsing modlist", path=path)

    text = _read_descriptor_text(path)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestParseError(path, f"invalid modlist JSON: {e}") from e

    try:
        descriptor = ModlistDescriptor.model_validate(data)
    except ValidationError as e:
        raise ManifestParseError(path, f"unexpected modlist structure: {e}") from e

    info = ManifestInfo.from_descriptor(path, descriptor)
    sink.info(
        "Parsed modlist",
        name=info.name,
        archives=info.archive_count,
        package_ids=len(info.package_ids),
        archive_names=len(info.archive_names),
    )
    return info


def read_manifests(paths: Iterable[Path], events: EventSink | None = None) -> list[ManifestInfo]:
    """Read several modlists, skipping those that fail to parse.

    Args:
        paths: Modlist container paths.
        events: Optional event sink; each skipped modlist emits a warning.

    Returns:
        ManifestInfo for every modlist that could be read, in input order.
    """
    sink = events or default_sink()
    manifests: list[ManifestInfo] = []

    for path in paths:
        try:
            manifests.append(read_manifest(path, sink))
        except ManifestParseError as e:
            sink.warn("Skipping unreadable modlist", path=e.path, reason=e.reason)

    return manifests


def find_manifest_files(folder: Path) -> list[Path]:
    """List modlist containers directly inside a folder.

    Args:
        folder: Directory to search (not recursive).

    Returns:
        Paths of ``*.wabbajack`` files, sorted by name.

    Raises:
        FolderReadError: If the folder cannot be listed.
    """
    try:
        entries = list(folder.iterdir())
    except OSError as e:
        raise FolderReadError(folder, e) from e

    return sorted(
        entry
        for entry in entries
        if entry.name.lower().endswith(MANIFEST_SUFFIX) and not entry.is_dir()
    )
