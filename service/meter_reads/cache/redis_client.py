"""
Redis client for the access-token cache.

Provides helpers for creating Redis connections and for reading and
writing cached energy-data access tokens. All cache operations are
best-effort: connection or command failures are logged and reported as a
cache miss, never raised.

CHANGELOG:
- 2026-10-14: Replace device cache invalidation with token get/set (STORY-005)
- 2026-10-12: Initial creation (STORY-001)
"""

import logging

import redis.asyncio as redis

from meter_reads.config import get_settings

logger = logging.getLogger(__name__)

TOKEN_KEY_PREFIX = "energy-token:"


def token_cache_key(client_id: str) -> str:
    """Return the Redis key holding the cached token for *client_id*."""
    return f"{TOKEN_KEY_PREFIX}{client_id}"


async def get_redis() -> redis.Redis:
    """Create and return an async Redis client from application settings.

    Returns:
        redis.Redis: Async Redis client.
    """
    return redis.from_url(get_settings().REDIS_URL, decode_responses=True)


async def get_cached_token(client_id: str) -> str | None:
    """Return the cached access token for *client_id*, or None on miss.

    Redis failures are logged and treated as a miss.

    Args:
        client_id: Token issuer client id the token was issued to.

    Returns:
        str | None: The cached token, or None.
    """
    try:
        client = await get_redis()
        try:
            token = await client.get(token_cache_key(client_id))
        finally:
            await client.aclose()
    except Exception:
        logger.warning(
            "Token cache read failed for client %s", client_id, exc_info=True,
        )
        return None
    return token or None


async def cache_token(client_id: str, token: str, ttl_s: int) -> None:
    """Store an access token with an expiry.

    Best-effort operation: if Redis is unavailable or the write fails, the
    error is logged but not raised.

    Args:
        client_id: Token issuer client id the token was issued to.
        token: The access token.
        ttl_s: Seconds until the cached entry expires. Must be positive.
    """
    try:
        client = await get_redis()
        try:
            await client.set(token_cache_key(client_id), token, ex=ttl_s)
        finally:
            await client.aclose()
    except Exception:
        logger.warning(
            "Token cache write failed for client %s", client_id, exc_info=True,
        )
