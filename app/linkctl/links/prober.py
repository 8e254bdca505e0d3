"""Current-state inspection of filesystem paths.

Uses a link-aware stat so that an existing symlink is always reported
as a symlink and never followed into whatever it points at.
"""

import errno
import logging
import os
import stat

from linkctl.links.errors import classify_os_error
from linkctl.links.models import CurrentState, EntryKind

logger = logging.getLogger(__name__)

# lstat failures meaning "nothing occupies this path"
_ABSENT_ERRNOS = frozenset({errno.ENOENT, errno.ENOTDIR})


def inspect(path: str) -> CurrentState:
    """Classify what currently occupies a path.

    Args:
        path: Path to inspect. The final component is never dereferenced.

    Returns:
        CurrentState for the path. ABSENT if nothing exists there.

    Raises:
        LinkError: For unexpected OS failures, e.g. permission denied while
            walking a parent directory.
    """
    try:
        st = os.lstat(path)
    except OSError as e:
        if e.errno in _ABSENT_ERRNOS:
            return CurrentState(path=path, kind=EntryKind.ABSENT)
        raise classify_os_error(e, path) from e

    identity = {"device": st.st_dev, "inode": st.st_ino, "link_count": st.st_nlink}
    ownership = {"owner_id": st.st_uid, "group_id": st.st_gid}

    if stat.S_ISLNK(st.st_mode):
        try:
            resolved = os.readlink(path)
        except OSError as e:
            raise classify_os_error(e, path) from e
        return CurrentState(
            path=path,
            kind=EntryKind.SYMLINK,
            resolved_target=resolved,
            **ownership,
            **identity,
        )

    if stat.S_ISDIR(st.st_mode):
        return CurrentState(path=path, kind=EntryKind.DIRECTORY, **identity)

    if stat.S_ISREG(st.st_mode):
        kind = EntryKind.HARD_LINK_CANDIDATE if st.st_nlink > 1 else EntryKind.REGULAR
        return CurrentState(path=path, kind=kind, **ownership, **identity)

    logger.debug("Path %s is neither file, directory nor symlink", path)
    return CurrentState(path=path, kind=EntryKind.OTHER, **identity)
