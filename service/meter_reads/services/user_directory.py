"""
User directory: which meters a user may query.

UserDirectory is the contract the ownership check consumes.
SqlUserDirectory implements it over the user_profiles table.

CHANGELOG:
- 2026-10-13: Initial creation (STORY-004)

TODO:
- None
"""

from collections.abc import Collection
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from meter_reads.db.models import UserProfile


class UserDirectory(Protocol):
    """Resolves a user to the meter identifiers they are entitled to."""

    async def entitled_meters(self, user_id: str) -> Collection[str] | None:
        """Return the user's entitled meters; None or empty means none."""
        ...


class SqlUserDirectory:
    """UserDirectory backed by the user_profiles table.

    Args:
        db: Async database session, owned by the caller.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def entitled_meters(self, user_id: str) -> frozenset[str]:
        """Return the user's meter_ids; unknown users and NULL arrays are empty."""
        result = await self._db.execute(
            select(UserProfile.meter_ids).where(UserProfile.user_id == user_id)
        )
        meter_ids = result.scalar_one_or_none()
        return frozenset(meter_ids or ())
