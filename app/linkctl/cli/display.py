"""Shared Rich display functions for link outcomes and probed state.

Provides reusable table builders and summary printers used by the
link, unlink, probe and apply commands.
"""

from rich.table import Table

from linkctl.links.models import CurrentState, LinkDescriptor, LinkKind, LinkOutcome
from linkctl.utils.formatting import console, format_link_error, print_success


def _status_cell(outcome: LinkOutcome) -> str:
    if outcome.failed:
        return "[error]FAIL[/error]"
    if outcome.dry_run and outcome.changed:
        return "[info]would change[/info]"
    if outcome.changed:
        return "[changed]changed[/changed]"
    return "[unchanged]ok[/unchanged]"


def _message_cell(outcome: LinkOutcome) -> str:
    if outcome.error is not None:
        return format_link_error(outcome.error)
    message = ", ".join(outcome.details)
    if outcome.attribute_error is not None:
        attribute_message = f"ownership {format_link_error(outcome.attribute_error)}"
        message = f"{message}; {attribute_message}" if message else attribute_message
    return message


def create_outcomes_table(outcomes: list[LinkOutcome], title: str = "Results") -> Table:
    """Create a Rich table displaying convergence outcomes.

    Args:
        outcomes: Outcomes to display, one row each.
        title: Table title.

    Returns:
        Rich Table configured for outcome display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=12, justify="center")
    table.add_column("Action", width=8)
    table.add_column("Path", overflow="fold")
    table.add_column("Message", style="muted", overflow="fold")

    for outcome in outcomes:
        table.add_row(
            _status_cell(outcome),
            outcome.action.value,
            outcome.path,
            _message_cell(outcome),
        )

    return table


def create_plan_table(
    entries: list[tuple[LinkDescriptor, LinkOutcome]],
    dry_run: bool = False,
) -> Table:
    """Create a Rich table displaying planned link changes.

    Args:
        entries: Descriptor and its dry-run outcome for each planned change.
        dry_run: Whether this is a dry-run (changes table title).

    Returns:
        Rich Table configured for plan display.
    """
    title = "Planned Changes (Dry Run)" if dry_run else "Planned Changes"
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Action", width=8, justify="center")
    table.add_column("Type", width=8)
    table.add_column("Path", overflow="fold")
    table.add_column("Destination", overflow="fold")
    table.add_column("Step", style="muted")

    for descriptor, outcome in entries:
        style = "hardlink" if descriptor.link_kind == LinkKind.HARD else "symlink"
        table.add_row(
            outcome.action.value,
            f"[{style}]{descriptor.link_kind.value}[/{style}]",
            descriptor.target_path,
            descriptor.destination or "-",
            _message_cell(outcome),
        )

    return table


def create_state_table(state: CurrentState) -> Table:
    """Create a Rich table describing the probed state of a path."""
    table = Table(
        title="Current State",
        show_header=False,
        border_style="border",
    )
    table.add_column("Field", style="bold_header")
    table.add_column("Value", overflow="fold")

    table.add_row("path", state.path)
    table.add_row("kind", state.kind.value)
    if state.resolved_target is not None:
        table.add_row("points to", state.resolved_target)
    if state.owner_id is not None:
        table.add_row("owner", str(state.owner_id))
    if state.group_id is not None:
        table.add_row("group", str(state.group_id))
    if state.link_count is not None:
        table.add_row("links", str(state.link_count))

    return table


def print_outcomes_summary(outcomes: list[LinkOutcome]) -> None:
    """Print a summary of convergence outcomes.

    Args:
        outcomes: Outcomes to summarize.
    """
    failed = sum(1 for o in outcomes if o.failed)
    changed = sum(1 for o in outcomes if o.changed and not o.failed)
    unchanged = len(outcomes) - failed - changed

    if failed == 0:
        print_success(f"{changed} changed, {unchanged} already in desired state.")
    else:
        console.print(
            f"\n[changed]{changed} changed[/changed], "
            f"[unchanged]{unchanged} unchanged[/unchanged], "
            f"[error]{failed} failed[/error]"
        )
