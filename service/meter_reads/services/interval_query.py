"""
Windowed interval read query against the TimescaleDB store.

Builds and runs the hourly aggregation query behind GET /v1/interval-reads:
per-hour, per-register sums of interval_reads for one meter over a fixed
365-day window ending two days before the anchor date (or before "now"
when no anchor is given).

The window is evaluated by the database. The anchor is bound as text and
cast to ``date`` server-side, so a malformed anchor is rejected by
PostgreSQL and surfaces as StoreQueryFailed; there is no local date
parsing.

CHANGELOG:
- 2026-10-16: Compute window bounds in UTC wall-clock time (STORY-006)
- 2026-10-15: Report failures to the error sink before raising (STORY-006)
- 2026-10-13: Initial creation (STORY-004)

TODO:
- None
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import TextClause, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from meter_reads.errors import StoreQueryFailed, report_error

logger = logging.getLogger(__name__)

# Window is [anchor - WINDOW_START_DAYS, anchor - WINDOW_END_DAYS).
# Bounds are computed on UTC wall-clock timestamps so day arithmetic never
# crosses a DST shift of the session TimeZone.
WINDOW_START_DAYS = 367
WINDOW_END_DAYS = 2

_INTERVAL_READS_SQL = text(
    "WITH bounds AS ("
    " SELECT COALESCE("
    "CAST(CAST(CAST(:anchor_date AS text) AS date) AS timestamp), "
    "now() AT TIME ZONE 'UTC') AS anchor"
    ") "
    "SELECT time_bucket('1 hour', r.read_ts) AS ts_hour, "
    "r.register_suffix AS register_suffix, "
    "SUM(r.read_value) AS read_sum "
    "FROM interval_reads AS r, bounds AS b "
    "WHERE r.meter_id = :meter_id "
    "AND r.read_ts >= (b.anchor - make_interval(days => :window_start_days)) AT TIME ZONE 'UTC' "
    "AND r.read_ts < (b.anchor - make_interval(days => :window_end_days)) AT TIME ZONE 'UTC' "
    "GROUP BY ts_hour, r.register_suffix "
    "ORDER BY ts_hour ASC"
)


@dataclass(frozen=True)
class IntervalReadRow:
    """One aggregated store row.

    Attributes:
        ts: Hour-truncated timestamp (datetime from the store; ISO string
            is accepted too).
        register_suffix: Register channel code.
        value: Sum of read values for that hour and register.
    """

    ts: datetime | str
    register_suffix: str
    value: float


def normalize_anchor_date(anchor_date: str | None) -> str | None:
    """Map an empty anchor to None so both mean "anchor on now"."""
    return anchor_date or None


def build_interval_query(
    meter_id: str,
    anchor_date: str | None = None,
) -> tuple[TextClause, dict]:
    """Build the parameterized hourly aggregation query.

    Args:
        meter_id: Meter identifier, non-empty.
        anchor_date: Normalized ``YYYY-MM-DD`` anchor, or None for now().

    Returns:
        Tuple of (statement, bound parameters). Neither value is ever
        interpolated into the SQL text.

    Raises:
        ValueError: If *meter_id* is empty.
    """
    if not meter_id:
        raise ValueError("meter_id must be a non-empty string")

    params = {
        "meter_id": meter_id,
        "anchor_date": anchor_date,
        "window_start_days": WINDOW_START_DAYS,
        "window_end_days": WINDOW_END_DAYS,
    }
    return _INTERVAL_READS_SQL, params


async def query_interval_reads(
    db: AsyncSession,
    meter_id: str,
    anchor_date: str | None = None,
) -> list[IntervalReadRow]:
    """Run the hourly aggregation query for one meter.

    Args:
        db: Async database session.
        meter_id: Meter identifier, non-empty.
        anchor_date: Normalized ``YYYY-MM-DD`` anchor, or None for now().

    Returns:
        list[IntervalReadRow]: Rows ordered by timestamp ascending.

    Raises:
        StoreQueryFailed: If the store rejects or fails the query. The
            underlying exception is chained as ``__cause__``.
    """
    stmt, params = build_interval_query(meter_id, anchor_date)

    try:
        result = await db.execute(stmt, params)
        rows = result.mappings().all()
    except (SQLAlchemyError, OSError) as exc:
        error = StoreQueryFailed(meter_id, anchor_date)
        report_error(
            exc,
            "Interval read query failed: meter_id=%s anchor_date=%s",
            meter_id,
            anchor_date,
        )
        raise error from exc

    logger.debug(
        "Interval read query: meter_id=%s anchor_date=%s rows=%d",
        meter_id,
        anchor_date,
        len(rows),
    )

    return [
        IntervalReadRow(
            ts=row["ts_hour"],
            register_suffix=row["register_suffix"],
            value=row["read_sum"],
        )
        for row in rows
    ]
