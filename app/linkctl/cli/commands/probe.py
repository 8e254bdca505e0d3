"""Probe command implementation.

Shows what currently occupies a path, without following symlinks.
"""

import json
from dataclasses import asdict
from enum import Enum
from typing import Annotated

import typer

from linkctl.cli.display import create_state_table
from linkctl.links import LinkError, probe
from linkctl.utils.formatting import console, format_link_error, print_error


class OutputFormat(str, Enum):
    """Output format options for probe."""

    TABLE = "table"
    JSON = "json"


def probe_path(
    path: Annotated[str, typer.Argument(help="Path to inspect.")],
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Show the current state of PATH."""
    try:
        state = probe(path)
    except LinkError as e:
        print_error(format_link_error(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        data = asdict(state)
        data["kind"] = state.kind.value
        console.print_json(json.dumps(data))
        return

    console.print(create_state_table(state))
