"""Utility modules for modsweep.

This module exports commonly used utility functions.
"""

from modsweep.utils.formatting import (
    console,
    err_console,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
    timestamp_to_date,
)

__all__ = [
    "console",
    "err_console",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "timestamp_to_date",
]
