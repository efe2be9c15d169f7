"""
Interval reads handler: ownership check, windowed query, pivot.

This is the handler at the end of the request pipeline. A meter the user
is not entitled to yields an empty list without touching the store.

CHANGELOG:
- 2026-10-13: Initial creation (STORY-004)

TODO:
- None
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from meter_reads.services.interval_query import query_interval_reads
from meter_reads.services.ownership import is_meter_entitled
from meter_reads.services.transform import pivot_interval_reads
from meter_reads.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)


async def get_interval_reads(
    db: AsyncSession,
    directory: UserDirectory,
    user_id: str,
    meter_id: str,
    anchor_date: str | None = None,
) -> list[dict]:
    """Return pivoted hourly interval reads for a user's meter.

    Args:
        db: Async database session for the time-series store.
        directory: User directory for the ownership check.
        user_id: User making the request.
        meter_id: Requested meter identifier.
        anchor_date: Normalized ``YYYY-MM-DD`` anchor, or None for now.

    Returns:
        list[dict]: Records ascending by timestamp; empty if the user is
        not entitled to the meter or no rows match.

    Raises:
        StoreQueryFailed: If the store query fails.
    """
    if not await is_meter_entitled(directory, user_id, meter_id):
        logger.info(
            "Meter %s not in entitled set of user %s, returning no reads",
            meter_id,
            user_id,
        )
        return []

    rows = await query_interval_reads(db, meter_id, anchor_date)
    return pivot_interval_reads(rows)
