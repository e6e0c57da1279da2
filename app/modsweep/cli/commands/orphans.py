"""Orphaned archive commands.

Compares the library against the active modlists and removes archives
that none of them reference.
"""

from pathlib import Path
from typing import Annotated

import typer

from modsweep.cli.display import create_manifests_table, create_orphans_table, print_outcome
from modsweep.cli.types import ProgressBar, get_config, resolve_backup_dir, resolve_dir
from modsweep.core.classifier import classify
from modsweep.core.collector import collect, list_candidate_folders
from modsweep.core.config import SweepConfig
from modsweep.core.errors import FolderReadError
from modsweep.core.executor import DeletionExecutor
from modsweep.core.manifest import find_manifest_files, read_manifests
from modsweep.models.archive import ClassificationResult
from modsweep.utils.formatting import (
    console,
    format_size,
    print_error,
    print_info,
    print_success,
)

app = typer.Typer(
    help="Find and remove archives no active modlist uses.",
    no_args_is_help=True,
)

RootArg = Annotated[
    Path | None,
    typer.Argument(help="Library root (defaults to downloads_dir from config)."),
]
ModlistsOpt = Annotated[
    Path | None,
    typer.Option("--modlists", "-m", help="Folder holding the active modlists."),
]
ModlistFileOpt = Annotated[
    list[Path] | None,
    typer.Option("--modlist", help="Use only this modlist file (repeatable)."),
]


def _classify(
    root: Path | None,
    modlists_dir: Path | None,
    modlist_files: list[Path] | None,
    config: SweepConfig,
) -> ClassificationResult:
    """Read the active modlists and classify the library against them."""
    library = resolve_dir(root, config.downloads_dir, "library root")

    if modlist_files:
        paths = modlist_files
    else:
        folder = resolve_dir(modlists_dir, config.modlists_dir, "modlist folder")
        try:
            paths = find_manifest_files(folder)
        except FolderReadError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e

    manifests = read_manifests(paths)
    if not manifests:
        print_error("No readable modlists found; refusing to classify against nothing.")
        raise typer.Exit(code=1)
    console.print(create_manifests_table(manifests))

    try:
        folders = list_candidate_folders(library)
    except FolderReadError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    files = collect(folders, max_workers=config.max_workers)
    return classify(files, manifests, max_workers=config.max_workers)


def _print_summary(result: ClassificationResult) -> None:
    console.print(
        f"\n[dim]{len(result.used)} used ({format_size(result.used_bytes)}), "
        f"{len(result.orphaned)} orphaned ({format_size(result.orphaned_bytes)})[/dim]"
    )


@app.command()
def scan(
    root: RootArg = None,
    modlists_dir: ModlistsOpt = None,
    modlist_files: ModlistFileOpt = None,
) -> None:
    """List archives no active modlist references."""
    config = get_config()
    result = _classify(root, modlists_dir, modlist_files, config)

    if not result.orphaned:
        print_success("Library is clean. No orphaned archives found.")
        return

    console.print(create_orphans_table(result.orphaned))
    _print_summary(result)


@app.command()
def clean(
    root: RootArg = None,
    modlists_dir: ModlistsOpt = None,
    modlist_files: ModlistFileOpt = None,
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
    """Remove archives no active modlist references."""
    config = get_config()
    result = _classify(root, modlists_dir, modlist_files, config)

    if not result.orphaned:
        print_success("Library is clean. No orphaned archives found.")
        return

    console.print(create_orphans_table(result.orphaned))
    _print_summary(result)

    backup_dir = resolve_backup_dir(backup, no_backup, config)
    if not dry_run and not yes:
        target = f"move them to {backup_dir}" if backup_dir else "delete them permanently"
        confirmed = typer.confirm(
            f"\nProceed and {target} ({len(result.orphaned)} file(s))?",
            default=False,
        )
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    executor = DeletionExecutor(dry_run=dry_run)
    with ProgressBar("Removing orphans") as progress:
        outcome = executor.delete_orphans(result.orphaned, backup_dir, progress)

    print_outcome(outcome)
    if outcome.failed:
        raise typer.Exit(code=1)
