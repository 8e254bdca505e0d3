"""CLI commands for linkctl.

This package contains all command implementations.
"""

from linkctl.cli.commands import add, apply, link, probe

__all__ = ["add", "apply", "link", "probe"]
