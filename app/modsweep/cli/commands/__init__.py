"""CLI commands for modsweep.

This package contains all subcommand implementations.
"""

from modsweep.cli.commands import config, duplicates, orphans, stats

__all__ = ["config", "duplicates", "orphans", "stats"]
