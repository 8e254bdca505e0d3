"""Link convergence engine.

Entry points for probing a path and converging a LinkDescriptor to its
desired state. Every call probes the target afresh; no state is kept
between calls.

Concurrency contract: calls are synchronous and share no mutable state,
so disjoint target paths may be converged concurrently. Probe-then-act
is not atomic against other actors changing the same path in between;
callers must serialise work on any single target path themselves.
"""

import functools
import logging
import os
from collections.abc import Callable

from linkctl.links.attributes import attributes_differ, enforce, resolve_gid, resolve_uid
from linkctl.links.errors import LinkError, classify_os_error
from linkctl.links.models import (
    CurrentState,
    LinkAction,
    LinkDescriptor,
    LinkOutcome,
    OutcomeStatus,
)
from linkctl.links.planner import Plan, PlanStep, plan_create, plan_delete
from linkctl.links.prober import inspect
from linkctl.links.strategies import get_strategy

logger = logging.getLogger(__name__)

# Called with the target path while the entry about to be destroyed is still in place
BackupHook = Callable[[str], None]

ATTRIBUTES_DETAIL = "attributes"


def probe(path: str) -> CurrentState:
    """Return the current state of a path without changing anything."""
    return inspect(path)


def create(
    desired: LinkDescriptor,
    *,
    backup: BackupHook | None = None,
    dry_run: bool = False,
) -> LinkOutcome:
    """Converge a link to exist as described.

    Args:
        desired: Desired link state.
        backup: Optional hook run before an existing entry is replaced.
        dry_run: If True, report what would change without writing.

    Returns:
        LinkOutcome with status UNCHANGED or CHANGED. Ownership failures after
        a successful link step are reported in attribute_error.

    Raises:
        LinkError: If the link cannot be created. Refusals leave the
            filesystem untouched.
    """
    plan = plan_create(desired, inspect(desired.target_path))
    _log_plan(desired, LinkAction.CREATE, plan)

    if plan.refusal is not None:
        raise plan.refusal

    if plan.step == PlanStep.NOTHING:
        if dry_run:
            return _dry_run_attributes(desired, plan.current)
        attributes_changed, attribute_error = _apply_attributes(desired)
        return LinkOutcome(
            path=desired.target_path,
            action=LinkAction.CREATE,
            status=OutcomeStatus.CHANGED if attributes_changed else OutcomeStatus.UNCHANGED,
            details=(ATTRIBUTES_DETAIL,) if attributes_changed else (),
            attribute_error=attribute_error,
        )

    if dry_run:
        return LinkOutcome(
            path=desired.target_path,
            action=LinkAction.CREATE,
            status=OutcomeStatus.CHANGED,
            details=(plan.step.value,),
            dry_run=True,
        )

    before_swap = None
    if backup is not None and plan.is_destructive:
        before_swap = functools.partial(backup, desired.target_path)

    get_strategy(desired.link_kind).create(desired, before_swap)
    logger.info(
        "Created %s link %s -> %s",
        desired.link_kind.value,
        desired.target_path,
        desired.destination,
    )

    attributes_changed, attribute_error = _apply_attributes(desired)
    details = (plan.step.value,) + ((ATTRIBUTES_DETAIL,) if attributes_changed else ())
    return LinkOutcome(
        path=desired.target_path,
        action=LinkAction.CREATE,
        status=OutcomeStatus.CHANGED,
        details=details,
        attribute_error=attribute_error,
    )


def delete(
    desired: LinkDescriptor,
    *,
    backup: BackupHook | None = None,
    dry_run: bool = False,
) -> LinkOutcome:
    """Converge a link to not exist.

    Only removes an entry of the kind desired.link_kind describes.

    Args:
        desired: Link to remove. The destination is not consulted.
        backup: Optional hook run before the link is removed.
        dry_run: If True, report what would change without writing.

    Returns:
        LinkOutcome with status UNCHANGED (already absent) or CHANGED.

    Raises:
        LinkError: LINK_TYPE_MISMATCH if another kind of entry occupies the
            path, or the classified OS failure of the removal.
    """
    plan = plan_delete(desired, inspect(desired.target_path))
    _log_plan(desired, LinkAction.DELETE, plan)

    if plan.refusal is not None:
        raise plan.refusal

    if plan.step == PlanStep.NOTHING:
        return LinkOutcome(
            path=desired.target_path,
            action=LinkAction.DELETE,
            status=OutcomeStatus.UNCHANGED,
            dry_run=dry_run,
        )

    if not dry_run:
        if backup is not None:
            backup(desired.target_path)
        try:
            os.unlink(desired.target_path)
        except OSError as e:
            raise classify_os_error(e, desired.target_path) from e
        logger.info("Removed %s link %s", desired.link_kind.value, desired.target_path)

    return LinkOutcome(
        path=desired.target_path,
        action=LinkAction.DELETE,
        status=OutcomeStatus.CHANGED,
        details=(PlanStep.REMOVE.value,),
        dry_run=dry_run,
    )


def converge(
    desired: LinkDescriptor,
    action: LinkAction = LinkAction.CREATE,
    *,
    backup: BackupHook | None = None,
    dry_run: bool = False,
) -> LinkOutcome:
    """Converge a link and report the outcome instead of raising.

    Args:
        desired: Desired link state.
        action: CREATE or DELETE.
        backup: Optional hook run before destructive changes.
        dry_run: If True, report what would change without writing.

    Returns:
        LinkOutcome. Link failures are returned with status FAILED.
    """
    try:
        if action == LinkAction.DELETE:
            return delete(desired, backup=backup, dry_run=dry_run)
        return create(desired, backup=backup, dry_run=dry_run)
    except LinkError as e:
        return LinkOutcome(
            path=desired.target_path,
            action=action,
            status=OutcomeStatus.FAILED,
            error=e,
            dry_run=dry_run,
        )


def _apply_attributes(desired: LinkDescriptor) -> tuple[bool, LinkError | None]:
    """Enforce ownership, returning (changed, error) instead of raising."""
    try:
        changed = enforce(desired.target_path, desired.owner, desired.group, desired.link_kind)
    except LinkError as e:
        logger.warning("Could not set ownership of %s: %s", desired.target_path, e)
        return False, e
    return changed, None


def _dry_run_attributes(desired: LinkDescriptor, current: CurrentState) -> LinkOutcome:
    """Report whether ownership would change for an already correct link."""
    would_change = False
    attribute_error = None
    if desired.has_attributes:
        try:
            uid = resolve_uid(desired.owner)
            gid = resolve_gid(desired.group)
        except LinkError as e:
            attribute_error = e
        else:
            would_change = attributes_differ(current, uid, gid)

    return LinkOutcome(
        path=desired.target_path,
        action=LinkAction.CREATE,
        status=OutcomeStatus.CHANGED if would_change else OutcomeStatus.UNCHANGED,
        details=(ATTRIBUTES_DETAIL,) if would_change else (),
        attribute_error=attribute_error,
        dry_run=True,
    )


def _log_plan(desired: LinkDescriptor, action: LinkAction, plan: Plan) -> None:
    if plan.refusal is not None:
        logger.info(
            "Refusing to %s %s: %s (found %s)",
            action.value,
            desired.target_path,
            plan.refusal.kind.value,
            plan.current.kind.value,
        )
        return
    logger.debug(
        "Planned %s for %s %s (found %s)",
        plan.step.value,
        action.value,
        desired.target_path,
        plan.current.kind.value,
    )
