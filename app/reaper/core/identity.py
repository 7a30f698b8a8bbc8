"""Caller identity snapshot used for permission evaluation.

The effective user id, effective group id and supplementary groups are
captured once per session. Group membership is not re-read per entry.
"""

import logging
import os
from dataclasses import dataclass, field

from reaper.core.errors import ConstructionError, UnsupportedPlatformError

logger = logging.getLogger(__name__)

SUPERUSER_ID = 0


@dataclass(frozen=True, slots=True)
class Credentials:
    """Effective identity of the scanning process.

    Attributes:
        euid: Effective user id.
        egid: Effective group id.
        groups: Supplementary group ids.
    """

    euid: int
    egid: int
    groups: frozenset[int] = field(default_factory=frozenset)

    @property
    def is_superuser(self) -> bool:
        return self.euid == SUPERUSER_ID


def current_credentials() -> Credentials:
    """Capture the credentials of the running process.

    Returns:
        Credentials snapshot.

    Raises:
        UnsupportedPlatformError: If the platform has no POSIX id calls.
        ConstructionError: If the supplementary groups cannot be enumerated.
    """
    if not all(hasattr(os, name) for name in ("geteuid", "getegid", "getgroups")):
        msg = "Platform does not expose POSIX user, group and device metadata"
        raise UnsupportedPlatformError(msg)

    try:
        groups = frozenset(os.getgroups())
    except OSError as e:
        raise ConstructionError(f"Cannot enumerate supplementary groups: {e}") from e

    creds = Credentials(euid=os.geteuid(), egid=os.getegid(), groups=groups)
    logger.debug(
        "Captured credentials euid=%d egid=%d groups=%s",
        creds.euid,
        creds.egid,
        sorted(creds.groups),
    )
    return creds
