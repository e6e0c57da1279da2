"""Configuration commands."""

from pathlib import Path
from typing import Annotated

import typer

from modsweep.cli.types import get_config
from modsweep.core.config import ConfigError, SweepConfig, save_config
from modsweep.core.paths import get_config_path
from modsweep.utils.formatting import console, print_error, print_success

app = typer.Typer(
    help="Show or write the modsweep configuration.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Print the effective configuration."""
    config = get_config()
    console.print(f"[muted]# {get_config_path()}[/]")
    for key, value in config.model_dump().items():
        console.print(f"{key} = {value if value is not None else '-'}")


@app.command()
def init(
    downloads_dir: Annotated[
        Path,
        typer.Option("--downloads", "-d", help="Library root holding game folders."),
    ],
    modlists_dir: Annotated[
        Path | None,
        typer.Option("--modlists", "-m", help="Folder holding active modlists."),
    ] = None,
    backup_dir: Annotated[
        Path | None,
        typer.Option("--backup", "-b", help="Folder removed archives are moved to."),
    ] = None,
    no_backup: Annotated[
        bool,
        typer.Option("--no-backup", help="Delete permanently by default."),
    ] = False,
    min_size_mb: Annotated[
        float,
        typer.Option("--min-size", help="Minimum superseded file size in MB."),
    ] = 0.0,
) -> None:
    """Write a configuration file."""
    try:
        config = SweepConfig(
            downloads_dir=downloads_dir.expanduser(),
            modlists_dir=modlists_dir.expanduser() if modlists_dir else None,
            backup_dir=backup_dir.expanduser() if backup_dir else None,
            use_backup=not no_backup,
            min_size_mb=min_size_mb,
        )
        path = save_config(config)
    except (ValueError, ConfigError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Configuration written to {path}")
