"""
FastAPI dependency injection providers.

Provides database sessions, the user directory, the caller identity and
the request pipeline for use with FastAPI's Depends() mechanism. Shared
objects built at startup (BearerAuth, token provider) live on app.state.

CHANGELOG:
- 2026-10-14: Add get_pipeline and get_token_provider (STORY-005)
- 2026-10-13: Add get_user_directory and get_caller_identity (STORY-004)
- 2026-10-12: Initial creation (STORY-001)
"""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from meter_reads.auth.bearer import CallerIdentity
from meter_reads.clients.token_provider import TokenProvider
from meter_reads.db.session import get_async_session
from meter_reads.pipeline import Pipeline, acquire_token, require_admin
from meter_reads.services.user_directory import SqlUserDirectory, UserDirectory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session.

    Yields:
        AsyncSession: An async SQLAlchemy session.
    """
    async for session in get_async_session():
        yield session


# Type alias for injecting an async DB session via FastAPI Depends().
DbSession = Annotated[AsyncSession, Depends(get_db)]


async def get_user_directory(db: DbSession) -> UserDirectory:
    """Return the SQL-backed user directory bound to the request session."""
    return SqlUserDirectory(db)


async def get_caller_identity(request: Request) -> CallerIdentity | None:
    """Resolve the caller identity via BearerAuth on app.state.

    Args:
        request: The incoming FastAPI request.

    Returns:
        CallerIdentity | None: The identity, or None if unauthenticated.
    """
    return await request.app.state.auth.identify(request)


async def get_token_provider(request: Request) -> TokenProvider:
    """Return the token provider built at startup."""
    return request.app.state.token_provider


async def get_pipeline(
    provider: Annotated[TokenProvider, Depends(get_token_provider)],
) -> Pipeline:
    """Return the interval reads pipeline: admin guard, then token acquisition."""
    return Pipeline(stages=(require_admin, acquire_token(provider)))
