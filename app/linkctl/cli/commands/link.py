"""Link and unlink command implementations.

Converge a single link given on the command line, without a manifest.
"""

from typing import Annotated

import typer

from linkctl.cli.display import create_outcomes_table
from linkctl.links import LinkAction, LinkDescriptor, LinkKind, LinkOutcome, converge
from linkctl.utils.formatting import (
    console,
    format_link_error,
    print_error,
    print_info,
    print_warning,
)


def _report(outcome: LinkOutcome) -> None:
    """Print a single outcome and exit non-zero if it failed."""
    if outcome.error is not None:
        print_error(format_link_error(outcome.error))
        raise typer.Exit(code=1)

    console.print(create_outcomes_table([outcome]))

    if outcome.attribute_error is not None:
        print_error(f"Ownership not applied: {format_link_error(outcome.attribute_error)}")
        raise typer.Exit(code=1)

    if outcome.dry_run:
        print_info("Dry-run mode: No changes were made.")


def link(
    target: Annotated[str, typer.Argument(help="Path of the link to create.")],
    destination: Annotated[str, typer.Argument(help="What the link points at.")],
    hard: Annotated[
        bool,
        typer.Option("--hard", "-H", help="Create a hard link instead of a symbolic link."),
    ] = False,
    owner: Annotated[
        str | None,
        typer.Option("--owner", "-o", help="Owner name or uid (symbolic links only)."),
    ] = None,
    group: Annotated[
        str | None,
        typer.Option("--group", "-g", help="Group name or gid (symbolic links only)."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-n", help="Show what would be done without making changes."),
    ] = False,
) -> None:
    """Create or correct a link at TARGET pointing at DESTINATION.

    Existing files and links at TARGET are replaced; directories are
    never replaced.

    Examples:
        linkctl link ~/.vimrc ~/dotfiles/vimrc
        linkctl link /srv/data/current.db /srv/data/2024.db --hard
    """
    descriptor = LinkDescriptor(
        target_path=target,
        destination=destination,
        link_kind=LinkKind.HARD if hard else LinkKind.SYMBOLIC,
        owner=owner,
        group=group,
    )
    if hard and (owner or group):
        print_warning("Owner and group are ignored for hard links.")

    _report(converge(descriptor, LinkAction.CREATE, dry_run=dry_run))


def unlink(
    target: Annotated[str, typer.Argument(help="Path of the link to remove.")],
    hard: Annotated[
        bool,
        typer.Option("--hard", "-H", help="Expect a hard link instead of a symbolic link."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-n", help="Show what would be done without making changes."),
    ] = False,
) -> None:
    """Remove the link at TARGET.

    Only an entry of the expected link type is removed; regular files,
    directories and the other kind of link are left untouched.
    """
    descriptor = LinkDescriptor(
        target_path=target,
        link_kind=LinkKind.HARD if hard else LinkKind.SYMBOLIC,
    )
    _report(converge(descriptor, LinkAction.DELETE, dry_run=dry_run))
