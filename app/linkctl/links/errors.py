"""Error taxonomy for link convergence.

Maps OS-level failures onto a small closed set of error kinds so that
callers can react to them without inspecting errno values themselves.
"""

import errno
from collections.abc import Mapping
from enum import Enum


class ErrorKind(str, Enum):
    """Kind of failure surfaced by the link engine.

    Attributes:
        NOT_FOUND: A required path does not exist (e.g. hard link destination).
        IS_A_DIRECTORY: A directory occupies the target path.
        OPERATION_NOT_PERMITTED: The OS refused the operation (e.g. hard
            linking a directory or across devices).
        PERMISSION_DENIED: Insufficient rights for the link or ownership change.
        LINK_TYPE_MISMATCH: Delete refused because the entry is not the
            expected kind of link.
        UNKNOWN: Any other OS failure; the cause is kept.
    """

    NOT_FOUND = "not_found"
    IS_A_DIRECTORY = "is_a_directory"
    OPERATION_NOT_PERMITTED = "operation_not_permitted"
    PERMISSION_DENIED = "permission_denied"
    LINK_TYPE_MISMATCH = "link_type_mismatch"
    UNKNOWN = "unknown"


ERRNO_KINDS: dict[int, ErrorKind] = {
    errno.ENOENT: ErrorKind.NOT_FOUND,
    errno.EISDIR: ErrorKind.IS_A_DIRECTORY,
    errno.EPERM: ErrorKind.OPERATION_NOT_PERMITTED,
    errno.EXDEV: ErrorKind.OPERATION_NOT_PERMITTED,
    errno.EACCES: ErrorKind.PERMISSION_DENIED,
}


class LinkError(Exception):
    """Typed failure raised by the link engine.

    Attributes:
        kind: Classified error kind.
        path: Path the failing operation was about.
        cause: Underlying exception, if any.
    """

    def __init__(
        self,
        kind: ErrorKind,
        path: str,
        cause: BaseException | None = None,
    ) -> None:
        self.kind = kind
        self.path = path
        self.cause = cause
        super().__init__(f"{kind.value}: {path}")

    def __repr__(self) -> str:
        return f"LinkError(kind={self.kind.value!r}, path={self.path!r}, cause={self.cause!r})"


def classify_errno(
    code: int | None,
    overrides: Mapping[int, ErrorKind] | None = None,
) -> ErrorKind:
    """Return the error kind for an errno value.

    Args:
        code: errno value, or None if the failure carried none.
        overrides: Per-operation mapping consulted before ERRNO_KINDS.
    """
    if code is None:
        return ErrorKind.UNKNOWN
    if overrides and code in overrides:
        return overrides[code]
    return ERRNO_KINDS.get(code, ErrorKind.UNKNOWN)


def classify_os_error(
    exc: OSError,
    path: str,
    overrides: Mapping[int, ErrorKind] | None = None,
) -> LinkError:
    """Wrap an OSError into a LinkError.

    Args:
        exc: The OS-level failure.
        path: Path the operation was about.
        overrides: Per-operation errno mapping that takes precedence over
            ERRNO_KINDS, e.g. for ownership changes.

    Returns:
        LinkError with the classified kind and the original exception as cause.
    """
    return LinkError(classify_errno(exc.errno, overrides), path, cause=exc)
