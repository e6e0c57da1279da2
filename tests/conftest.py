"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import json
import zipfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

ArchiveFactory = Callable[..., Path]
ModlistFactory = Callable[..., Path]


@pytest.fixture
def make_archive() -> ArchiveFactory:
    """Create an archive file of a given size inside a folder."""

    def _make(folder: Path, name: str, size: int = 1024) -> Path:
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / name
        path.write_bytes(b"\0" * size)
        return path

    return _make


@pytest.fixture
def make_modlist() -> ModlistFactory:
    """Write a modlist container holding a ``modlist`` JSON member."""

    def _make(
        path: Path,
        archives: list[dict[str, Any]],
        name: str = "Test Modlist",
        **extra: Any,
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        descriptor = {"Name": name, "Archives": archives, **extra}
        with zipfile.ZipFile(path, "w") as container:
            container.writestr("modlist", json.dumps(descriptor))
        return path

    return _make


class RecordingSink:
    """Event sink that keeps every event for assertions."""

    def __init__(self) -> None:
        self.infos: list[tuple[str, dict[str, Any]]] = []
        self.warnings: list[tuple[str, dict[str, Any]]] = []
        self.errors: list[tuple[str, dict[str, Any]]] = []

    def info(self, message: str, **fields: Any) -> None:
        self.infos.append((message, fields))

    def warn(self, message: str, **fields: Any) -> None:
        self.warnings.append((message, fields))

    def error(self, message: str, **fields: Any) -> None:
        self.errors.append((message, fields))


@pytest.fixture
def events() -> RecordingSink:
    """Event sink recording engine events."""
    return RecordingSink()
