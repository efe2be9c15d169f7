"""
Domain exceptions for the interval reads request pipeline.

Pipeline stages and services raise these; the FastAPI application maps
them to HTTP responses in ``meter_reads.api.main``. Ownership mismatches
and empty query results are not errors and have no exception type.

CHANGELOG:
- 2026-10-15: Add report_error() error-sink helper (STORY-006)
- 2026-10-12: Initial creation (STORY-002)

TODO:
- None
"""

import logging
import sys

logger = logging.getLogger(__name__)


class IntervalReadsError(Exception):
    """Base class for all interval reads pipeline failures."""


class AuthorizationDenied(IntervalReadsError):
    """Caller identity is missing or lacks administrative privilege."""


class TokenAcquisitionFailed(IntervalReadsError):
    """Energy-data access token could not be obtained (error or empty token)."""


class StoreQueryFailed(IntervalReadsError):
    """Time-series store query failed.

    Attributes:
        meter_id: Meter identifier the query was issued for.
        anchor_date: Anchor date bound into the query, or None.
    """

    def __init__(self, meter_id: str, anchor_date: str | None = None) -> None:
        self.meter_id = meter_id
        self.anchor_date = anchor_date
        message = f"Interval read query failed for meter_id={meter_id!r}"
        if anchor_date is not None:
            message += f", anchor_date={anchor_date!r}"
        super().__init__(message)


def report_error(exc: BaseException, message: str, *args: object) -> None:
    """Send a failure to the error sink (the ``logging`` error channel).

    Never raises: a broken sink is reported on stderr and the caller goes
    on to propagate its original error.

    Args:
        exc: The exception being reported.
        message: %-style log message.
        *args: Arguments for *message*.
    """
    try:
        logger.error(message, *args, exc_info=exc)
    except Exception as sink_exc:  # noqa: BLE001
        sys.stderr.write(f"Error sink failed ({sink_exc!r}) while reporting: {exc!r}\n")
