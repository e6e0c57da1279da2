"""Superseded archive version commands.

Groups archives of the same package within each game folder and removes
all but the newest member of every group that passes the safety gates.
"""

from pathlib import Path
from typing import Annotated

import typer

from modsweep.cli.display import create_groups_table, print_outcome
from modsweep.cli.types import ProgressBar, get_config, resolve_backup_dir, resolve_dir
from modsweep.core.collector import list_candidate_folders
from modsweep.core.errors import FolderReadError
from modsweep.core.executor import DeletionExecutor
from modsweep.core.grouper import group_folder
from modsweep.models.archive import DeletionOutcome, DuplicateGroup
from modsweep.utils.formatting import (
    console,
    format_size,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Find and remove superseded versions of the same archive.",
    no_args_is_help=True,
)

RootArg = Annotated[
    Path | None,
    typer.Argument(help="Library root (defaults to downloads_dir from config)."),
]


def _scan(root: Path | None, folder_name: str | None) -> list[tuple[Path, list[DuplicateGroup]]]:
    """Group every candidate folder, optionally only the one named."""
    config = get_config()
    library = resolve_dir(root, config.downloads_dir, "library root")

    try:
        folders = list_candidate_folders(library)
    except FolderReadError as e:
        print_warning(str(e))
        raise typer.Exit(code=1) from e

    if folder_name is not None:
        folders = [f for f in folders if f.name == folder_name]
        if not folders:
            print_warning(f"No folder named '{folder_name}' in {library}")
            raise typer.Exit(code=1)

    found: list[tuple[Path, list[DuplicateGroup]]] = []
    for folder in folders:
        try:
            result = group_folder(folder)
        except FolderReadError as e:
            print_warning(str(e))
            continue
        if result.groups:
            found.append((folder, result.groups))
    return found


FolderOpt = Annotated[
    str | None,
    typer.Option("--folder", "-f", help="Only scan the game folder with this name."),
]


@app.command()
def scan(root: RootArg = None, folder: FolderOpt = None) -> None:
    """List superseded archive versions per game folder."""
    found = _scan(root, folder)
    if not found:
        print_success("No superseded versions found.")
        return

    total_files = 0
    total_bytes = 0
    for path, groups in found:
        console.print(create_groups_table(groups, title=path.name or str(path)))
        total_files += sum(len(g.files) - 1 for g in groups)
        total_bytes += sum(g.reclaimable_bytes for g in groups)

    console.print(
        f"\n[dim]{total_files} superseded file(s) can be removed "
        f"({format_size(total_bytes)})[/dim]"
    )


@app.command()
def clean(
    root: RootArg = None,
    folder: FolderOpt = None,
    min_size: Annotated[
        float | None,
        typer.Option("--min-size", help="Only remove files of at least this many MB."),
    ] = None,
    backup: Annotated[
        Path | None,
        typer.Option("--backup", "-b", help="Move files here instead of the default."),
    ] = None,
    no_backup: Annotated[
        bool,
        typer.Option("--no-backup", help="Delete files permanently."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be removed."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Remove superseded archive versions, keeping the newest of each."""
    config = get_config()
    found = _scan(root, folder)
    if not found:
        print_success("No superseded versions found.")
        return

    groups = [g for _, folder_groups in found for g in folder_groups]
    console.print(create_groups_table(groups, title="Superseded Versions"))

    min_size_bytes = (
        int(min_size * 1024 * 1024) if min_size is not None else config.min_size_bytes
    )
    backup_dir = resolve_backup_dir(backup, no_backup, config)

    if not dry_run and not yes:
        count = sum(
            1 for g in groups for f in g.superseded if f.size_bytes >= min_size_bytes
        )
        target = f"move them to {backup_dir}" if backup_dir else "delete them permanently"
        confirmed = typer.confirm(f"\nProceed and {target} ({count} file(s))?", default=False)
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    executor = DeletionExecutor(dry_run=dry_run)
    with ProgressBar("Removing old versions") as progress:
        outcome: DeletionOutcome = executor.delete_superseded(
            groups, backup_dir, progress, min_size_bytes=min_size_bytes
        )

    print_outcome(outcome)
    if outcome.failed:
        raise typer.Exit(code=1)
