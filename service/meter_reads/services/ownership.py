"""
Ownership check binding a user to a meter identifier.

CHANGELOG:
- 2026-10-13: Initial creation (STORY-004)

TODO:
- None
"""

import logging

from meter_reads.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


async def is_meter_entitled(
    directory: UserDirectory,
    user_id: str,
    meter_id: str,
) -> bool:
    """Return True if *meter_id* is in the user's entitled set.

    A directory entry that is None or empty grants nothing. Directory
    failures propagate as-is, with the user id added as an exception note.

    Args:
        directory: User directory to consult.
        user_id: User making the request.
        meter_id: Requested meter identifier.

    Returns:
        bool: Whether the user may query the meter.
    """
    try:
        entitled = await directory.entitled_meters(user_id)
    except Exception as exc:
        exc.add_note(f"user directory lookup failed for user_id={user_id!r}")
        raise

    return meter_id in (entitled or ())
