"""Link domain models.

This module defines the desired-state descriptor for a link, the probed
current state of a path, and the outcome of a convergence call.
"""

from dataclasses import dataclass
from enum import Enum

from linkctl.links.errors import ErrorKind, LinkError


class LinkKind(str, Enum):
    """Kind of link to manage.

    Attributes:
        SYMBOLIC: Symbolic link storing a destination string.
        HARD: Hard link sharing the destination's inode.
    """

    SYMBOLIC = "symbolic"
    HARD = "hard"


class LinkAction(str, Enum):
    """Convergence action requested for a link."""

    CREATE = "create"
    DELETE = "delete"


class EntryKind(str, Enum):
    """What currently occupies a filesystem path.

    Attributes:
        ABSENT: Nothing exists at the path.
        REGULAR: Regular file with a single link.
        DIRECTORY: Directory (never followed through a symlink).
        SYMLINK: Symbolic link, live or dangling.
        HARD_LINK_CANDIDATE: Regular file with more than one link.
        OTHER: Fifo, socket, device node or similar.
    """

    ABSENT = "absent"
    REGULAR = "regular"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    HARD_LINK_CANDIDATE = "hard_link_candidate"
    OTHER = "other"


class OutcomeStatus(str, Enum):
    """Result status of a convergence call."""

    UNCHANGED = "unchanged"
    CHANGED = "changed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class LinkDescriptor:
    """Desired state of a single link.

    Attributes:
        target_path: Path where the link lives. Identity key of the resource.
        destination: What the link points at. Kept literally, never normalised.
        link_kind: Symbolic (default) or hard.
        owner: Numeric uid, numeric string or local user name. Symbolic only.
        group: Numeric gid, numeric string or local group name. Symbolic only.
    """

    target_path: str
    destination: str = ""
    link_kind: LinkKind = LinkKind.SYMBOLIC
    owner: int | str | None = None
    group: int | str | None = None

    def __post_init__(self) -> None:
        """Validate descriptor data after initialization."""
        if not self.target_path:
            msg = "Target path cannot be empty"
            raise ValueError(msg)

    @property
    def is_hard(self) -> bool:
        """Check if this descriptor describes a hard link."""
        return self.link_kind == LinkKind.HARD

    @property
    def has_attributes(self) -> bool:
        """Check if owner or group is meaningful for this descriptor.

        Hard links share their inode with the destination, so ownership
        is never applied to them.
        """
        return not self.is_hard and (self.owner is not None or self.group is not None)


@dataclass(frozen=True, slots=True)
class CurrentState:
    """Probed state of a filesystem path.

    Always derived from the path entry itself, never from what a symlink
    resolves to.

    Attributes:
        path: Inspected path.
        kind: Classification of the entry.
        resolved_target: Literal readlink() value for symlinks, None otherwise.
        owner_id: uid of the entry itself (None when absent or a directory).
        group_id: gid of the entry itself (None when absent or a directory).
        device: st_dev of the entry (None when absent).
        inode: st_ino of the entry (None when absent).
        link_count: st_nlink of the entry (None when absent).
    """

    path: str
    kind: EntryKind
    resolved_target: str | None = None
    owner_id: int | None = None
    group_id: int | None = None
    device: int | None = None
    inode: int | None = None
    link_count: int | None = None

    @property
    def exists(self) -> bool:
        """Check if anything occupies the path."""
        return self.kind != EntryKind.ABSENT

    @property
    def identity(self) -> tuple[int, int] | None:
        """Return (device, inode), or None when the path is absent."""
        if self.device is None or self.inode is None:
            return None
        return (self.device, self.inode)


@dataclass(frozen=True, slots=True)
class LinkOutcome:
    """Outcome of converging a single link.

    The link step and the ownership step are reported separately: a link
    that was created but whose ownership could not be applied has
    status CHANGED and a non-empty attribute_error.

    Attributes:
        path: Target path that was converged.
        action: Requested action (create or delete).
        status: Unchanged, changed or failed.
        details: Short machine-friendly notes about what changed.
        error: Failure of the link step, if any.
        attribute_error: Failure of the ownership step, if any.
        dry_run: Whether this outcome was computed without writing.
    """

    path: str
    action: LinkAction
    status: OutcomeStatus
    details: tuple[str, ...] = ()
    error: LinkError | None = None
    attribute_error: LinkError | None = None
    dry_run: bool = False

    @property
    def changed(self) -> bool:
        """Check if the link (or its attributes) changed."""
        return self.status == OutcomeStatus.CHANGED

    @property
    def failed(self) -> bool:
        """Check if any step of the convergence failed."""
        return self.status == OutcomeStatus.FAILED or self.attribute_error is not None

    @property
    def error_kind(self) -> ErrorKind | None:
        """Kind of the first failure, or None on success."""
        if self.error is not None:
            return self.error.kind
        if self.attribute_error is not None:
            return self.attribute_error.kind
        return None
