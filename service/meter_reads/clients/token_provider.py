"""
Energy-data access token provider.

Obtains the opaque access token the request pipeline needs before the
interval reads handler runs. HttpTokenProvider performs an OAuth2
client-credentials grant against the token issuer with httpx, caching the
token in Redis for most of its lifetime.

Any failure (network error, timeout, non-200 status, non-JSON body,
missing or empty ``access_token``) raises TokenAcquisitionFailed. No
retries: a failed acquisition fails the request.

CHANGELOG:
- 2026-10-14: Cache tokens in Redis until shortly before expiry (STORY-005)
- 2026-10-13: Initial creation (STORY-005)

TODO:
- None
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from meter_reads.cache.redis_client import cache_token, get_cached_token
from meter_reads.errors import TokenAcquisitionFailed

logger = logging.getLogger(__name__)

# Cached tokens expire this many seconds before the issuer's expiry.
TOKEN_EXPIRY_MARGIN_S = 60


class TokenProvider(Protocol):
    """Anything that can hand out an energy-data access token."""

    async def get_token(self) -> str:
        """Return an access token or raise."""
        ...


class HttpTokenProvider:
    """OAuth2 client-credentials token provider.

    Args:
        token_url: Token issuer endpoint. Must start with ``https://``.
        client_id: OAuth2 client id.
        client_secret: OAuth2 client secret.
        timeout_s: HTTP timeout in seconds.
        use_cache: Read and write the Redis token cache.

    Raises:
        ValueError: If *token_url* does not start with ``https://``.
    """

    def __init__(
        self,
        token_url: str,
        client_id: str,
        client_secret: str,
        timeout_s: float = 10.0,
        use_cache: bool = True,
    ) -> None:
        if not token_url.lower().startswith("https://"):
            raise ValueError(f"Token URL must use HTTPS (got: '{token_url}').")
        self._token_url = token_url
        self._client_id = client_id
        self._client_secret = client_secret
        self._timeout_s = timeout_s
        self._use_cache = use_cache

    async def get_token(self) -> str:
        """Return a cached token or request a fresh one from the issuer.

        Returns:
            str: Non-empty access token.

        Raises:
            TokenAcquisitionFailed: If no usable token could be obtained.
        """
        if self._use_cache:
            cached = await get_cached_token(self._client_id)
            if cached:
                return cached

        try:
            async with httpx.AsyncClient(verify=True, timeout=self._timeout_s) as client:
                response = await client.post(
                    self._token_url,
                    data={
                        "grant_type": "client_credentials",
                        "client_id": self._client_id,
                        "client_secret": self._client_secret,
                    },
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as exc:
            logger.warning("Token request failed (network error): %s", exc)
            raise TokenAcquisitionFailed("Token issuer unreachable") from exc

        if response.status_code != 200:
            logger.warning("Token request failed (HTTP %d)", response.status_code)
            raise TokenAcquisitionFailed(
                f"Token issuer returned HTTP {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise TokenAcquisitionFailed("Token issuer returned a non-JSON body") from exc

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            raise TokenAcquisitionFailed("Token issuer returned an empty token")

        expires_in = payload.get("expires_in")
        if (
            self._use_cache
            and isinstance(expires_in, (int, float))
            and expires_in > TOKEN_EXPIRY_MARGIN_S
        ):
            await cache_token(self._client_id, token, int(expires_in - TOKEN_EXPIRY_MARGIN_S))

        logger.info("Acquired energy-data access token for client %s", self._client_id)
        return token
