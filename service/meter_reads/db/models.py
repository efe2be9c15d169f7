"""
SQLAlchemy ORM models for the interval reads database.

Defines IntervalRead, the raw meter register reading stored in a
TimescaleDB hypertable, and UserProfile, the user directory record that
lists the meters a user may query.

CHANGELOG:
- 2026-10-13: Add UserProfile with nullable meter_ids array (STORY-004)
- 2026-10-12: Initial creation (STORY-001)

TODO:
- None
"""

import datetime

from sqlalchemy import DateTime, Double, Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all ORM models."""

    pass


class IntervalRead(Base):
    """Single register reading from an energy meter.

    Stored in the interval_reads TimescaleDB hypertable with a composite
    primary key on (meter_id, read_ts, register_suffix).

    Attributes:
        meter_id: Identifier of the metering point.
        read_ts: Reading timestamp in UTC.
        register_suffix: Register channel code (e.g. E1 import, B1 export).
        read_value: Energy read for the interval, in kWh.
    """

    __tablename__ = "interval_reads"

    meter_id: Mapped[str] = mapped_column(
        Text,
        primary_key=True,
        nullable=False,
    )
    read_ts: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        primary_key=True,
        nullable=False,
    )
    register_suffix: Mapped[str] = mapped_column(
        Text,
        primary_key=True,
        nullable=False,
    )
    read_value: Mapped[float] = mapped_column(Double, nullable=False)

    def __repr__(self) -> str:
        """Return string representation of the IntervalRead."""
        return (
            f"IntervalRead(meter_id={self.meter_id!r}, read_ts={self.read_ts!r}, "
            f"register_suffix={self.register_suffix!r})"
        )


class UserProfile(Base):
    """User directory entry.

    Attributes:
        user_id: Identifier of the user.
        meter_ids: Meter identifiers the user is entitled to query.
            NULL and an empty array both mean no entitlement.
    """

    __tablename__ = "user_profiles"

    user_id: Mapped[str] = mapped_column(Text, primary_key=True, nullable=False)
    meter_ids: Mapped[list[str] | None] = mapped_column(ARRAY(Text), nullable=True)

    def __repr__(self) -> str:
        """Return string representation of the UserProfile."""
        return f"UserProfile(user_id={self.user_id!r})"
