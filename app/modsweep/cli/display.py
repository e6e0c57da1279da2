"""Shared Rich display functions for scan and deletion results."""

from rich.markup import escape
from rich.table import Table

from modsweep.models.archive import (
    ArchiveFile,
    DeletionOutcome,
    DuplicateGroup,
    LibraryStats,
    OrphanRecord,
)
from modsweep.models.manifest import ManifestInfo
from modsweep.utils.formatting import (
    console,
    format_size,
    print_info,
    print_success,
    print_warning,
    timestamp_to_date,
)


def _table(title: str) -> Table:
    return Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )


def create_manifests_table(manifests: list[ManifestInfo]) -> Table:
    """Create a table listing the active modlists."""
    table = _table("Active Modlists")
    table.add_column("Modlist", no_wrap=True)
    table.add_column("Archives", justify="right")
    table.add_column("File", style="muted")

    for manifest in manifests:
        table.add_row(
            escape(manifest.name), str(manifest.archive_count), escape(manifest.path.name)
        )

    return table


def create_orphans_table(records: list[OrphanRecord]) -> Table:
    """Create a table of orphaned archives, largest first."""
    table = _table("Orphaned Archives")
    table.add_column("Archive", style="removed")
    table.add_column("Folder", style="muted")
    table.add_column("Package", justify="right")
    table.add_column("Size", style="info", justify="right")

    for record in sorted(records, key=lambda r: r.file.size_bytes, reverse=True):
        archive = record.file
        table.add_row(
            escape(archive.file_name),
            escape(archive.location.parent.name),
            archive.package_id,
            format_size(archive.size_bytes),
        )

    return table


def _group_row(archive: ArchiveFile, keep: bool) -> tuple[str, str, str, str]:
    label = "[kept]KEEP[/]" if keep else "[removed]DEL[/]"
    return (
        label,
        escape(archive.file_name),
        timestamp_to_date(archive.timestamp),
        format_size(archive.size_bytes),
    )


def create_groups_table(groups: list[DuplicateGroup], title: str) -> Table:
    """Create a table showing each group's kept and superseded members."""
    table = _table(escape(title))
    table.add_column("", width=4, justify="center")
    table.add_column("Archive")
    table.add_column("Uploaded", style="muted")
    table.add_column("Size", style="info", justify="right")

    for group in groups:
        for index, archive in enumerate(group.files):
            table.add_row(*_group_row(archive, index == group.newest_idx))
        table.add_section()

    return table


def create_stats_table(stats: LibraryStats) -> Table:
    """Create a table of archive counts per folder."""
    table = _table("Library Statistics")
    table.add_column("Folder", no_wrap=True)
    table.add_column("Archives", justify="right")
    table.add_column("Size", style="info", justify="right")

    for row in stats.folders:
        table.add_row(escape(row.name), str(row.file_count), format_size(row.size_bytes))
    table.add_section()
    table.add_row("[bold]Total[/]", str(stats.total_files), format_size(stats.total_bytes))

    return table


def print_outcome(outcome: DeletionOutcome) -> None:
    """Print the summary of a deletion batch."""
    freed = format_size(outcome.bytes_freed)
    if outcome.dry_run:
        print_info(f"Dry-run: {outcome.deleted_count} file(s) would be removed ({freed}).")
    elif outcome.failed:
        print_warning(
            f"{outcome.deleted_count} removed ({freed}), {len(outcome.skipped)} skipped"
        )
    else:
        print_success(f"Removed {outcome.deleted_count} file(s), freed {freed}.")

    for message in outcome.errors:
        console.print(f"  [error]-[/] [muted]{escape(message)}[/]")
