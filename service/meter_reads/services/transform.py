"""
Pivot aggregated store rows into per-timestamp client records.

Rows arrive as (hour, register_suffix, sum) triples. Each distinct hour
becomes one record::

    {"timestamp": "2024-11-20T00:00:00", "E1": 0.5, "B1": -0.2}

Only registers with a row at that hour appear (no zero fill). Values are
rounded to 3 decimals individually. Records are sorted by timestamp
ascending.

If the same (hour, register) pair appears more than once the values are
summed before rounding.

Rows that cannot be represented are skipped with a warning: a register
named "timestamp" would collide with the record key, and NaN or infinite
sums have no JSON encoding.

CHANGELOG:
- 2026-10-16: Skip "timestamp" registers and non-finite values (STORY-006)
- 2026-10-13: Initial creation (STORY-004)

TODO:
- None
"""

import logging
import math
from collections.abc import Iterable
from datetime import UTC, datetime

from meter_reads.services.interval_query import IntervalReadRow

logger = logging.getLogger(__name__)

VALUE_DECIMALS = 3
TIMESTAMP_KEY = "timestamp"


def _as_utc(ts: datetime | str) -> datetime:
    """Coerce a store timestamp to an aware UTC datetime.

    Naive values are taken to be UTC already.
    """
    if isinstance(ts, str):
        ts = datetime.fromisoformat(ts)
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def format_timestamp(ts: datetime) -> str:
    """Render a UTC timestamp as ISO-8601 seconds without an offset suffix."""
    return ts.astimezone(UTC).replace(tzinfo=None).isoformat(timespec="seconds")


def pivot_interval_reads(rows: Iterable[IntervalReadRow]) -> list[dict]:
    """Group rows by timestamp and pivot registers into record keys.

    Args:
        rows: Aggregated store rows, in any order. May be empty.

    Returns:
        list[dict]: One record per distinct timestamp, ascending.
    """
    grouped: dict[datetime, dict[str, float]] = {}
    for row in rows:
        if row.register_suffix == TIMESTAMP_KEY:
            logger.warning(
                "Skipping interval read with reserved register name %r at %s",
                row.register_suffix,
                row.ts,
            )
            continue
        registers = grouped.setdefault(_as_utc(row.ts), {})
        registers[row.register_suffix] = (
            registers.get(row.register_suffix, 0.0) + float(row.value)
        )

    records = []
    for ts in sorted(grouped):
        record: dict = {TIMESTAMP_KEY: format_timestamp(ts)}
        for suffix, value in grouped[ts].items():
            if not math.isfinite(value):
                logger.warning(
                    "Dropping non-finite interval read %s=%r at %s",
                    suffix,
                    value,
                    record[TIMESTAMP_KEY],
                )
                continue
            record[suffix] = round(value, VALUE_DECIMALS)
        records.append(record)
    return records
