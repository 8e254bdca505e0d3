"""Apply command implementation.

Converges every link declared in the manifest, in declaration order.
"""

from pathlib import Path
from typing import Annotated

import typer

from linkctl.cli.display import create_outcomes_table, create_plan_table, print_outcomes_summary
from linkctl.core.manifest import require_manifest
from linkctl.links import LinkAction, LinkDescriptor, LinkOutcome, converge
from linkctl.utils.formatting import console, print_info, print_success


def _plan(
    descriptors: list[tuple[LinkDescriptor, LinkAction]],
) -> list[tuple[LinkDescriptor, LinkOutcome]]:
    """Dry-run every entry and keep those that would change or fail."""
    planned: list[tuple[LinkDescriptor, LinkOutcome]] = []
    for descriptor, action in descriptors:
        outcome = converge(descriptor, action, dry_run=True)
        if outcome.changed or outcome.failed:
            planned.append((descriptor, outcome))
    return planned


def _confirm(change_count: int) -> bool:
    """Prompt user to confirm applying changes."""
    return typer.confirm(
        f"\nProceed with {change_count} change(s)?",
        default=False,
    )


def apply_manifest(
    manifest_path: Annotated[
        Path | None,
        typer.Option(
            "--manifest",
            "-m",
            help="Manifest file (default: ~/.config/linkctl/links.toml).",
        ),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt and proceed.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be done without making changes.",
        ),
    ] = False,
) -> None:
    """Apply the link manifest to the system.

    Links marked "create" are created or corrected; links marked
    "delete" are removed if they are of the declared link type.

    Examples:
        linkctl apply --dry-run          # Preview changes
        linkctl apply --yes              # Apply without confirmation
    """
    manifest = require_manifest(manifest_path)
    descriptors = manifest.to_descriptors()

    planned = _plan(descriptors)
    if not planned:
        print_success("All links are already in the desired state. Nothing to do.")
        return

    console.print(create_plan_table(planned, dry_run=dry_run))

    if dry_run:
        print_info("\nDry-run mode: No changes were made.")
        if any(outcome.failed for _, outcome in planned):
            raise typer.Exit(code=1)
        return

    if not yes and not _confirm(len(planned)):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    # Every entry is converged again: state is never trusted across calls
    outcomes = [converge(descriptor, action) for descriptor, action in descriptors]

    console.print(create_outcomes_table(outcomes))
    print_outcomes_summary(outcomes)

    if any(o.failed for o in outcomes):
        raise typer.Exit(code=1)
