"""Convergence planning for links.

Pure decision logic: compares a desired LinkDescriptor with a freshly
probed CurrentState and selects what has to happen. Nothing here writes
to the filesystem; refusals are decided before any change is made.
"""

from dataclasses import dataclass
from enum import Enum

from linkctl.links.errors import ErrorKind, LinkError
from linkctl.links.models import CurrentState, EntryKind, LinkDescriptor, LinkKind
from linkctl.links.strategies import get_strategy


class PlanStep(str, Enum):
    """Step selected by the planner.

    Attributes:
        NOTHING: Link already in the desired state (attributes may still change).
        CREATE: Nothing occupies the target; create the link.
        REPLACE: Another entry occupies the target; replace it with the link.
        REMOVE: Remove the link at the target.
        REFUSE: The request cannot be satisfied safely.
    """

    NOTHING = "nothing"
    CREATE = "create"
    REPLACE = "replace"
    REMOVE = "remove"
    REFUSE = "refuse"


@dataclass(frozen=True, slots=True)
class Plan:
    """Decision for a single convergence call.

    Attributes:
        step: Selected step.
        current: State the decision was based on.
        refusal: Error to raise when step is REFUSE.
    """

    step: PlanStep
    current: CurrentState
    refusal: LinkError | None = None

    def __post_init__(self) -> None:
        """Validate plan data after initialization."""
        if (self.step == PlanStep.REFUSE) != (self.refusal is not None):
            msg = "A refusal error is required for REFUSE plans only"
            raise ValueError(msg)

    @property
    def is_destructive(self) -> bool:
        """Check if executing this plan removes an existing entry."""
        return self.step in (PlanStep.REPLACE, PlanStep.REMOVE)


# Entry kind a delete expects for each link kind
DELETABLE_KINDS: dict[LinkKind, EntryKind] = {
    LinkKind.SYMBOLIC: EntryKind.SYMLINK,
    LinkKind.HARD: EntryKind.HARD_LINK_CANDIDATE,
}


def plan_create(desired: LinkDescriptor, current: CurrentState) -> Plan:
    """Plan the create action.

    Order of checks:
    1. Already satisfied by the strategy -> NOTHING
    2. Directory at the target -> REFUSE (is_a_directory)
    3. Strategy preflight refusal -> REFUSE
    4. Absent target -> CREATE, anything else -> REPLACE

    Args:
        desired: Desired link state.
        current: Freshly probed state of desired.target_path.

    Returns:
        Plan for the create action.
    """
    strategy = get_strategy(desired.link_kind)

    if strategy.already_satisfied(desired, current):
        return Plan(step=PlanStep.NOTHING, current=current)

    if current.kind == EntryKind.DIRECTORY:
        return Plan(
            step=PlanStep.REFUSE,
            current=current,
            refusal=LinkError(ErrorKind.IS_A_DIRECTORY, desired.target_path),
        )

    refusal = strategy.preflight(desired)
    if refusal is not None:
        return Plan(step=PlanStep.REFUSE, current=current, refusal=refusal)

    if current.kind == EntryKind.ABSENT:
        return Plan(step=PlanStep.CREATE, current=current)
    return Plan(step=PlanStep.REPLACE, current=current)


def plan_delete(desired: LinkDescriptor, current: CurrentState) -> Plan:
    """Plan the delete action.

    Only an entry of exactly the expected link kind is removed. Symlinks
    are removed regardless of where they point, dangling ones included.

    Args:
        desired: Desired link state (destination is not consulted).
        current: Freshly probed state of desired.target_path.

    Returns:
        Plan for the delete action.
    """
    if current.kind == EntryKind.ABSENT:
        return Plan(step=PlanStep.NOTHING, current=current)

    if current.kind == DELETABLE_KINDS[desired.link_kind]:
        return Plan(step=PlanStep.REMOVE, current=current)

    return Plan(
        step=PlanStep.REFUSE,
        current=current,
        refusal=LinkError(ErrorKind.LINK_TYPE_MISMATCH, desired.target_path),
    )
