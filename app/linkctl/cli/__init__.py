"""Command-line interface for linkctl.

This package contains the Typer application and command implementations.
"""

from linkctl.cli.main import app

__all__ = ["app"]
