"""Symbolic and hard link strategies.

Each link kind maps to a bundle of plain functions: one recognising an
already-correct target, one refusing impossible requests before anything
is written, and one creating the link. The planner looks strategies up
by LinkKind; there is no class hierarchy.
"""

import contextlib
import logging
import os
import uuid
from collections.abc import Callable
from dataclasses import dataclass

from linkctl.links.errors import ErrorKind, LinkError, classify_os_error
from linkctl.links.models import CurrentState, EntryKind, LinkDescriptor, LinkKind
from linkctl.links.prober import inspect

logger = logging.getLogger(__name__)

SwapHook = Callable[[], None]

# Characters of the target name kept in the staging name
STAGING_PREFIX_LEN = 32


@dataclass(frozen=True, slots=True)
class LinkStrategy:
    """Functions implementing one kind of link.

    Attributes:
        already_satisfied: True if the current state already matches.
        preflight: Returns a refusal for requests that cannot succeed, None otherwise.
        create: Creates the link, replacing any non-directory entry.
    """

    already_satisfied: Callable[[LinkDescriptor, CurrentState], bool]
    preflight: Callable[[LinkDescriptor], LinkError | None]
    create: Callable[[LinkDescriptor, SwapHook | None], None]


def _staging_path(target_path: str) -> str:
    """Return a unique sibling path used to stage a new link.

    The staged name stays short for any target name, so it never exceeds
    NAME_MAX when the target itself does not.
    """
    directory, name = os.path.split(target_path)
    return os.path.join(directory, f".{name[:STAGING_PREFIX_LEN]}.{uuid.uuid4().hex[:12]}.tmp")


def _stage_and_swap(
    target_path: str,
    make_link: Callable[[str], None],
    before_swap: SwapHook | None,
) -> None:
    """Create a link at a staging path, then rename it over the target.

    The existing entry at target_path stays in place until the final
    os.replace(), so before_swap still sees the old content.

    Raises:
        LinkError: If staging or the swap fails. The staged link is removed.
    """
    staging = _staging_path(target_path)
    try:
        make_link(staging)
    except OSError as e:
        raise classify_os_error(e, target_path) from e

    try:
        if before_swap is not None:
            before_swap()
        os.replace(staging, target_path)
    except OSError as e:
        _discard(staging)
        raise classify_os_error(e, target_path) from e
    except BaseException:
        _discard(staging)
        raise


def _discard(path: str) -> None:
    with contextlib.suppress(FileNotFoundError):
        os.unlink(path)


# === Symbolic ===


def _symbolic_satisfied(desired: LinkDescriptor, current: CurrentState) -> bool:
    # Literal comparison: an equivalent but differently spelled path is not a match
    return current.kind == EntryKind.SYMLINK and current.resolved_target == desired.destination


def _symbolic_preflight(desired: LinkDescriptor) -> LinkError | None:
    if not desired.destination:
        return LinkError(ErrorKind.NOT_FOUND, desired.target_path)
    return None


def _symbolic_create(desired: LinkDescriptor, before_swap: SwapHook | None) -> None:
    logger.debug("Linking %s -> %s (symbolic)", desired.target_path, desired.destination)
    _stage_and_swap(
        desired.target_path,
        lambda staging: os.symlink(desired.destination, staging),
        before_swap,
    )


# === Hard ===


def _hard_satisfied(desired: LinkDescriptor, current: CurrentState) -> bool:
    if current.kind not in (EntryKind.HARD_LINK_CANDIDATE, EntryKind.SYMLINK):
        return False
    if not desired.destination:
        return False
    destination = inspect(desired.destination)
    return destination.identity is not None and destination.identity == current.identity


def _hard_preflight(desired: LinkDescriptor) -> LinkError | None:
    if not desired.destination:
        return LinkError(ErrorKind.NOT_FOUND, desired.target_path)
    destination = inspect(desired.destination)
    if destination.kind == EntryKind.ABSENT:
        return LinkError(ErrorKind.NOT_FOUND, desired.destination)
    if destination.kind == EntryKind.DIRECTORY:
        return LinkError(ErrorKind.OPERATION_NOT_PERMITTED, desired.destination)
    return None


def _hard_create(desired: LinkDescriptor, before_swap: SwapHook | None) -> None:
    # follow_symlinks=False: a symlink destination is replicated, not resolved
    logger.debug("Linking %s -> %s (hard)", desired.target_path, desired.destination)
    _stage_and_swap(
        desired.target_path,
        lambda staging: os.link(desired.destination, staging, follow_symlinks=False),
        before_swap,
    )


STRATEGIES: dict[LinkKind, LinkStrategy] = {
    LinkKind.SYMBOLIC: LinkStrategy(
        already_satisfied=_symbolic_satisfied,
        preflight=_symbolic_preflight,
        create=_symbolic_create,
    ),
    LinkKind.HARD: LinkStrategy(
        already_satisfied=_hard_satisfied,
        preflight=_hard_preflight,
        create=_hard_create,
    ),
}


def get_strategy(kind: LinkKind) -> LinkStrategy:
    """Return the strategy for a link kind.

    Raises:
        KeyError: If kind is not a known LinkKind.
    """
    return STRATEGIES[kind]
