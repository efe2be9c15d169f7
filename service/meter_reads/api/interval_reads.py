"""
GET /v1/interval-reads endpoint for a user's hourly meter readings.

Returns per-hour register sums for the 365-day window ending two days
before ``anchor_date`` (or before now), one record per hour. The request
runs through the admin guard and token acquisition stages before the
handler; their failures are mapped to HTTP responses by the exception
handlers in ``meter_reads.api.main``.

CHANGELOG:
- 2026-10-14: Route through Pipeline instead of inline checks (STORY-005)
- 2026-10-13: Initial creation (STORY-004)

TODO:
- None
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from meter_reads.api.deps import (
    DbSession,
    get_caller_identity,
    get_pipeline,
    get_user_directory,
)
from meter_reads.auth.bearer import CallerIdentity
from meter_reads.pipeline import Pipeline, RequestContext
from meter_reads.services.interval_query import normalize_anchor_date
from meter_reads.services.interval_reads import get_interval_reads
from meter_reads.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", tags=["interval-reads"])


@router.get("/interval-reads", response_model=list[dict[str, str | float]])
async def list_interval_reads(
    identity: Annotated[CallerIdentity | None, Depends(get_caller_identity)],
    pipeline: Annotated[Pipeline, Depends(get_pipeline)],
    db: DbSession,
    directory: Annotated[UserDirectory, Depends(get_user_directory)],
    user_id: Annotated[str, Query(min_length=1, description="User identifier.")],
    meter_id: Annotated[
        str,
        Query(min_length=1, description="Meter identifier to query."),
    ],
    anchor_date: Annotated[
        str | None,
        Query(description="Anchor date (YYYY-MM-DD). Defaults to now."),
    ] = None,
) -> list[dict]:
    """Return hourly interval reads for one of a user's meters.

    Args:
        identity: Caller identity from the bearer token, if any.
        pipeline: Admin guard and token acquisition stages.
        db: Async database session.
        directory: User directory for the ownership check.
        user_id: User whose meter is queried.
        meter_id: Meter identifier.
        anchor_date: Optional anchor date; empty means now.

    Returns:
        list[dict]: ``{"timestamp": ..., <register>: value, ...}`` records,
        ascending. Empty when the meter is not the user's or has no reads.
    """
    ctx = RequestContext(
        user_id=user_id,
        meter_id=meter_id,
        anchor_date=normalize_anchor_date(anchor_date),
        identity=identity,
    )

    async def handler(ctx: RequestContext) -> list[dict]:
        return await get_interval_reads(
            db, directory, ctx.user_id, ctx.meter_id, ctx.anchor_date,
        )

    records = await pipeline.run(ctx, handler)

    logger.debug(
        "Interval reads: user_id=%s meter_id=%s anchor_date=%s records=%d",
        user_id,
        meter_id,
        ctx.anchor_date,
        len(records),
    )
    return records
