"""
Bearer token identification for the interval reads API.

Parses caller tokens from the API_TOKENS environment variable and resolves
incoming ``Authorization: Bearer {token}`` headers to a CallerIdentity.
Uses constant-time comparison via secrets.compare_digest to prevent timing
attacks.

Identification never rejects a request by itself: an unknown or missing
token resolves to ``None`` and the authorization guard in
``meter_reads.pipeline`` decides what to do with it.

CHANGELOG:
- 2026-10-13: Carry the admin role flag on CallerIdentity (STORY-003)
- 2026-10-12: Initial creation (STORY-003)

TODO:
- None
"""

import logging
import secrets
from dataclasses import dataclass

from fastapi import Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class CallerIdentity:
    """Authorization context of an authenticated caller.

    Attributes:
        caller_id: Identifier of the calling principal.
        is_admin: Administrative privilege flag. ``None`` when the token
            entry carries no role at all.
    """

    caller_id: str
    is_admin: bool | None = None


def parse_api_tokens(raw: str) -> dict[str, CallerIdentity]:
    """Parse the API_TOKENS environment variable into a token-to-identity map.

    Format: "token1:caller1:admin,token2:caller2,token3:caller3:viewer"

    The optional third field is the caller's role. ``admin`` grants
    administrative privilege, any other role is an explicit non-admin, and
    no role leaves the flag unset.

    Entries without a colon separator are skipped with a warning.
    Leading/trailing whitespace is stripped from every field.

    Args:
        raw: The raw comma-separated token entries.

    Returns:
        dict[str, CallerIdentity]: Mapping of token -> caller identity.
    """
    if not raw or not raw.strip():
        return {}

    token_map: dict[str, CallerIdentity] = {}
    for idx, entry in enumerate(raw.split(",")):
        entry = entry.strip()
        if ":" not in entry:
            logger.warning(
                "Skipping malformed API_TOKENS entry at position %d"
                " (no colon separator)",
                idx,
            )
            continue
        token, _, rest = entry.partition(":")
        caller_id, sep, role = rest.partition(":")
        token = token.strip()
        caller_id = caller_id.strip()
        if not token or not caller_id:
            continue
        is_admin = role.strip().lower() == ADMIN_ROLE if sep else None
        token_map[token] = CallerIdentity(caller_id=caller_id, is_admin=is_admin)
    return token_map


def verify_bearer_token(
    token: str,
    token_map: dict[str, CallerIdentity],
) -> CallerIdentity | None:
    """Look up a bearer token in the token map using constant-time comparison.

    Args:
        token: The bearer token extracted from the Authorization header.
        token_map: Mapping of valid token -> caller identity.

    Returns:
        CallerIdentity | None: The identity if the token is known, None otherwise.
    """
    if not token:
        return None

    for registered_token, identity in token_map.items():
        if secrets.compare_digest(
            token.encode("utf-8"), registered_token.encode("utf-8")
        ):
            return identity

    return None


class BearerAuth:
    """FastAPI-compatible Bearer token identification dependency.

    Wraps HTTPBearer for OpenAPI documentation and resolves the extracted
    token against the configured token map.

    Attributes:
        token_map: Mapping of valid token -> caller identity.
        scheme: FastAPI HTTPBearer security scheme.
    """

    def __init__(self, token_map: dict[str, CallerIdentity]) -> None:
        """Initialise BearerAuth with a token-to-identity mapping.

        Args:
            token_map: Mapping of token -> caller identity.
        """
        self.token_map = token_map
        self.scheme = HTTPBearer(auto_error=False)

    async def identify(self, request: Request) -> CallerIdentity | None:
        """Resolve the request's Bearer token to a caller identity.

        Args:
            request: The incoming FastAPI request.

        Returns:
            CallerIdentity | None: The caller identity, or None when the
            header is missing, malformed, or carries an unknown token.
        """
        credentials: HTTPAuthorizationCredentials | None = await self.scheme(request)
        if credentials is None:
            return None
        return verify_bearer_token(credentials.credentials, self.token_map)
