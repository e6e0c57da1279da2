"""Development tasks for modsweep.

Usage: uv run devops.py <task>
Tasks: fmt, lint, test, test-unit, clean
"""

import shutil
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

ROOT = Path(__file__).resolve().parent

CACHE_DIRS = (".pytest_cache", ".ruff_cache", "build", "dist")


def _run(commands: list[list[str]]) -> None:
    """Run commands from the project root, exiting on the first failure."""
    for cmd in commands:
        try:
            subprocess.run(cmd, check=True, cwd=ROOT)  # nosec: B603, B607
        except subprocess.CalledProcessError as e:
            print(f"Command failed: {' '.join(e.cmd)}", file=sys.stderr)
            sys.exit(e.returncode)


def format_code() -> None:
    """Format the codebase and apply safe lint fixes with Ruff."""
    print("Formatting app/ and tests/ with Ruff")
    _run([["ruff", "format", "app", "tests"], ["ruff", "check", "--fix", "app", "tests"]])


def lint() -> None:
    """Check formatting and lint rules without changing files."""
    _run([["ruff", "format", "--check", "app", "tests"], ["ruff", "check", "app", "tests"]])


def test() -> None:
    """Run the whole test suite."""
    _run([["uv", "run", "pytest"]])


def test_unit() -> None:
    """Run unit tests only."""
    _run([["uv", "run", "pytest", "tests/unit"]])


def clean() -> None:
    """Remove bytecode, tool caches and build artifacts."""
    for pycache in ROOT.rglob("__pycache__"):
        shutil.rmtree(pycache, ignore_errors=True)
    for name in CACHE_DIRS:
        shutil.rmtree(ROOT / name, ignore_errors=True)
    for egg_info in ROOT.rglob("*.egg-info"):
        shutil.rmtree(egg_info, ignore_errors=True)
    print("Caches and build artifacts removed")


TASKS: dict[str, Callable[[], None]] = {
    "fmt": format_code,
    "lint": lint,
    "test": test,
    "test-unit": test_unit,
    "clean": clean,
}


if __name__ == "__main__":
    if len(sys.argv) != 2 or sys.argv[1] not in TASKS:
        print(__doc__, file=sys.stderr)
        sys.exit(2)
    TASKS[sys.argv[1]]()
