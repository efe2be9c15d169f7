"""
Database package for SQLAlchemy models and session management.

CHANGELOG:
- 2026-10-12: Initial creation (STORY-001)

TODO:
- None
"""

from meter_reads.db.models import Base, IntervalRead, UserProfile
from meter_reads.db.session import (
    create_engine,
    create_session_factory,
    dispose_engine,
    get_async_session,
    init_engine,
)

__all__ = [
    "Base",
    "IntervalRead",
    "UserProfile",
    "create_engine",
    "create_session_factory",
    "dispose_engine",
    "get_async_session",
    "init_engine",
]
