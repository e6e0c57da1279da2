"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich, plus the
human-readable size and date helpers shared by the engine.
"""

import sys
from datetime import UTC, datetime

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

_SIZE_UNITS: tuple[str, ...] = ("B", "KB", "MB", "GB", "TB", "PB")

THEME = Theme(
    {
        "text": "#ffffff",
        "muted": "#b2bec3",
        "header": "#69B9A1",
        "bold_header": "bold #69B9A1",
        "border": "#29526d",
        "success": "#03b971",
        "warning": "#f5b332",
        "error": "bold #f53263",
        "info": "#0ec1c8",
        "kept": "bold #69B9A1",
        "removed": "#f53263",
        "dim": "#b2bec3",
    }
)


def _detect_color_system() -> str | None:
    """Return "truecolor" for interactive terminals, None to auto-detect."""
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances
console = Console(theme=THEME, color_system=_detect_color_system())
err_console = Console(theme=THEME, stderr=True, color_system=_detect_color_system())


def format_size(size_bytes: int) -> str:
    """Format a byte count as a human-readable string.

    Sizes below 1 KB are shown as whole bytes; larger sizes use two
    decimals and binary units (``1572864`` -> ``"1.50 MB"``).

    Args:
        size_bytes: Size in bytes.

    Returns:
        Formatted size string.
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"

    size = float(size_bytes)
    unit = 0
    while size >= 1024 and unit < len(_SIZE_UNITS) - 1:
        size /= 1024
        unit += 1
    return f"{size:.2f} {_SIZE_UNITS[unit]}"


def timestamp_to_date(timestamp: str) -> str:
    """Render an upload timestamp as ``YYYY-MM-DD HH:MM`` (UTC).

    Returns:
        The formatted date, or "Unknown" if the timestamp is not a number.
    """
    try:
        moment = datetime.fromtimestamp(int(timestamp), tz=UTC)
    except (ValueError, OverflowError, OSError):
        return "Unknown"
    return moment.strftime("%Y-%m-%d %H:%M")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{escape(message)}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{escape(message)}[/]")
