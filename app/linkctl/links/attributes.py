"""Ownership enforcement for links.

Owner and group are applied to the symlink entry itself with lchown().
Hard links share their inode with the destination, so for them the
enforcer is a no-op that never inspects the path.
"""

import errno
import grp
import logging
import os
import pwd

from linkctl.links.errors import ErrorKind, LinkError, classify_os_error
from linkctl.links.models import CurrentState, LinkKind
from linkctl.links.prober import inspect

logger = logging.getLogger(__name__)

# Errno kinds for lchown() failures, checked before ERRNO_KINDS
OWNERSHIP_ERRNO_KINDS: dict[int, ErrorKind] = {
    errno.EPERM: ErrorKind.PERMISSION_DENIED,
    errno.EACCES: ErrorKind.PERMISSION_DENIED,
}


def _require_non_negative(value: int) -> int:
    if value < 0:
        raise LinkError(ErrorKind.NOT_FOUND, str(value))
    return value


def resolve_uid(owner: int | str | None) -> int | None:
    """Resolve an owner to a numeric uid.

    Args:
        owner: uid, numeric string or local user name. None means "leave as is".

    Returns:
        Numeric uid, or None if owner is None.

    Raises:
        LinkError: NOT_FOUND if the name is unknown to the local user database
            or the uid is negative.
    """
    if owner is None:
        return None
    if isinstance(owner, int):
        return _require_non_negative(owner)
    if owner.isdigit():
        return int(owner)
    try:
        return pwd.getpwnam(owner).pw_uid
    except KeyError as e:
        raise LinkError(ErrorKind.NOT_FOUND, owner, cause=e) from e


def resolve_gid(group: int | str | None) -> int | None:
    """Resolve a group to a numeric gid.

    Args:
        group: gid, numeric string or local group name. None means "leave as is".

    Returns:
        Numeric gid, or None if group is None.

    Raises:
        LinkError: NOT_FOUND if the name is unknown to the local group database
            or the gid is negative.
    """
    if group is None:
        return None
    if isinstance(group, int):
        return _require_non_negative(group)
    if group.isdigit():
        return int(group)
    try:
        return grp.getgrnam(group).gr_gid
    except KeyError as e:
        raise LinkError(ErrorKind.NOT_FOUND, group, cause=e) from e


def attributes_differ(current: CurrentState, uid: int | None, gid: int | None) -> bool:
    """Check whether applying uid/gid would change the entry."""
    if uid is not None and current.owner_id != uid:
        return True
    return gid is not None and current.group_id != gid


def enforce(
    path: str,
    owner: int | str | None,
    group: int | str | None,
    link_kind: LinkKind,
) -> bool:
    """Apply owner and group to a link entry.

    Args:
        path: Link path. The link itself is changed, not what it points at.
        owner: Desired owner, or None to leave unchanged.
        group: Desired group, or None to leave unchanged.
        link_kind: Kind of link at path. HARD makes this a no-op.

    Returns:
        True if ownership was changed, False if it already matched or
        the link is a hard link.

    Raises:
        LinkError: If a name cannot be resolved or lchown() fails.
    """
    if link_kind == LinkKind.HARD:
        return False
    if owner is None and group is None:
        return False

    uid = resolve_uid(owner)
    gid = resolve_gid(group)

    current = inspect(path)
    if not attributes_differ(current, uid, gid):
        return False

    try:
        os.lchown(path, -1 if uid is None else uid, -1 if gid is None else gid)
    except OSError as e:
        raise classify_os_error(e, path, OWNERSHIP_ERRNO_KINDS) from e

    logger.info("Changed ownership of %s to %s:%s", path, uid, gid)
    return True
