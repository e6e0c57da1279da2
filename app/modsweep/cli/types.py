"""Shared helpers for CLI commands.

Resolves folders from options or the config file, and adapts batch
progress to a Rich progress bar.
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType

import typer
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from modsweep.core.config import ConfigError, SweepConfig, load_config_or_default
from modsweep.utils.formatting import console, print_error


def get_config() -> SweepConfig:
    """Load the user config, exiting with an error if it is invalid."""
    try:
        return load_config_or_default()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def resolve_dir(value: Path | None, fallback: Path | None, label: str) -> Path:
    """Pick a directory from an option or the config, and check it exists.

    Args:
        value: Directory given on the command line.
        fallback: Directory from the config file.
        label: Human-readable name for error messages.

    Returns:
        The resolved directory.

    Raises:
        typer.Exit: If no directory is known or it does not exist.
    """
    folder = value or fallback
    if folder is None:
        print_error(f"No {label} given (pass it or set it with 'modsweep config init').")
        raise typer.Exit(code=1)
    folder = folder.expanduser()
    if not folder.is_dir():
        print_error(f"{label.capitalize()} is not a directory: {folder}")
        raise typer.Exit(code=1)
    return folder


def resolve_backup_dir(
    backup: Path | None,
    no_backup: bool,
    config: SweepConfig,
) -> Path | None:
    """Decide where removed files go (None means permanent deletion)."""
    if no_backup:
        return None
    if backup is not None:
        return backup.expanduser()
    return config.effective_backup_dir


class ProgressBar:
    """Progress observer rendering batch progress with Rich."""

    def __init__(self, description: str) -> None:
        self._progress = Progress(
            TextColumn("[info]{task.description}[/]"),
            BarColumn(),
            MofNCompleteColumn(),
            console=console,
            transient=True,
        )
        self._description = description
        self._task: int | None = None

    def __enter__(self) -> ProgressBar:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def on_progress(self, done: int, total: int) -> None:
        if self._task is None:
            self._task = self._progress.add_task(self._description, total=total)
        self._progress.update(self._task, completed=done - 1, total=total)
