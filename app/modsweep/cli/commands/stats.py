"""Library statistics command."""

from pathlib import Path
from typing import Annotated

import typer

from modsweep.cli.display import create_stats_table
from modsweep.cli.types import get_config, resolve_dir
from modsweep.core.collector import library_stats, list_candidate_folders
from modsweep.core.errors import FolderReadError
from modsweep.utils.formatting import console, print_error, print_info


def stats(
    root: Annotated[
        Path | None,
        typer.Argument(help="Library root (defaults to downloads_dir from config)."),
    ] = None,
) -> None:
    """Show archive counts and sizes per game folder."""
    config = get_config()
    library = resolve_dir(root, config.downloads_dir, "library root")

    try:
        folders = list_candidate_folders(library)
    except FolderReadError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    result = library_stats(folders, max_workers=config.max_workers)
    if not result.folders:
        print_info("No archives found.")
        return

    console.print(create_stats_table(result))
