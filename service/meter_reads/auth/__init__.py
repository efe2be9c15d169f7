"""
Authentication package.

Exports the BearerAuth dependency class, the CallerIdentity value type and
token parsing utilities for use by FastAPI route handlers.

CHANGELOG:
- 2026-10-12: Initial creation (STORY-003)

TODO:
- None
"""

from meter_reads.auth.bearer import (
    BearerAuth,
    CallerIdentity,
    parse_api_tokens,
    verify_bearer_token,
)

__all__ = ["BearerAuth", "CallerIdentity", "parse_api_tokens", "verify_bearer_token"]
