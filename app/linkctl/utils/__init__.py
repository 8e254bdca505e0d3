"""Utility modules for linkctl.

This module exports commonly used utility functions.
"""

from linkctl.utils.formatting import (
    console,
    err_console,
    format_link_error,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "err_console",
    "format_link_error",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
