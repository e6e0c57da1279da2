"""Exception types shared by the modsweep engine."""

from pathlib import Path


class ModsweepError(Exception):
    """Base exception for modsweep errors."""


class FolderReadError(ModsweepError):
    """Raised when a library folder cannot be listed."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to read directory {path}: {cause}")
