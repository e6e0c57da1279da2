"""Library classification and cleanup engine.

This module provides archive filename decomposition, modlist manifest
reading, library collection, orphan classification, duplicate version
grouping, and validated deletion.
"""

from modsweep.core.classifier import classify, merge_identity_sets
from modsweep.core.collector import collect, library_stats, list_candidate_folders
from modsweep.core.errors import FolderReadError, ModsweepError
from modsweep.core.events import (
    EventSink,
    LoggingEventSink,
    NullEventSink,
    ProgressObserver,
    default_sink,
)
from modsweep.core.executor import DeletionExecutor, is_file_locked
from modsweep.core.filename import decompose, extract_part_marker, normalize_name
from modsweep.core.grouper import group_files, group_folder
from modsweep.core.manifest import (
    ManifestError,
    ManifestParseError,
    find_manifest_files,
    read_manifest,
    read_manifests,
)

__all__ = [
    "DeletionExecutor",
    "EventSink",
    "FolderReadError",
    "LoggingEventSink",
    "ManifestError",
    "ManifestParseError",
    "ModsweepError",
    "NullEventSink",
    "ProgressObserver",
    "classify",
    "collect",
    "decompose",
    "default_sink",
    "extract_part_marker",
    "find_manifest_files",
    "group_files",
    "group_folder",
    "is_file_locked",
    "library_stats",
    "list_candidate_folders",
    "merge_identity_sets",
    "normalize_name",
    "read_manifest",
    "read_manifests",
]
