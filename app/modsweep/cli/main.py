"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from modsweep import __version__
from modsweep.cli.commands import config, duplicates, orphans, stats
from modsweep.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="modsweep",
    help="Find and remove unused or superseded mod archives.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"modsweep version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route engine log records to stderr through Rich."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Log every engine step.",
        ),
    ] = False,
) -> None:
    """modsweep - clean up a mod archive library.

    Finds archives no active modlist references and archives superseded
    by a newer upload of the same file, and removes them safely.
    """
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# Register commands
app.command(name="stats")(stats.stats)
app.add_typer(orphans.app, name="orphans")
app.add_typer(duplicates.app, name="duplicates")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
