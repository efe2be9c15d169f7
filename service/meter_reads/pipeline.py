"""
Request pipeline: ordered guard stages in front of a handler.

A Pipeline holds an explicit tuple of stages. Each stage receives the
per-request RequestContext and either returns (continue) or raises a
terminal IntervalReadsError, in which case no later stage and no handler
runs. The interval reads endpoint uses::

    Pipeline(stages=(require_admin, acquire_token(provider)))

CHANGELOG:
- 2026-10-14: Attach acquired access token to the context (STORY-005)
- 2026-10-13: Initial creation (STORY-003)

TODO:
- None
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from meter_reads.auth.bearer import CallerIdentity
from meter_reads.clients.token_provider import TokenProvider
from meter_reads.errors import AuthorizationDenied, TokenAcquisitionFailed

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RequestContext:
    """Per-request state passed through the pipeline.

    Attributes:
        user_id: User whose meter is being queried.
        meter_id: Requested meter identifier.
        anchor_date: Optional ``YYYY-MM-DD`` anchor, already normalized
            (empty string never reaches the pipeline).
        identity: Caller identity resolved from the bearer token, if any.
        access_token: Energy-data access token, set by acquire_token.
    """

    user_id: str
    meter_id: str
    anchor_date: str | None = None
    identity: CallerIdentity | None = None
    access_token: str | None = None


Stage = Callable[[RequestContext], Awaitable[None]]
Handler = Callable[[RequestContext], Awaitable[T]]


async def require_admin(ctx: RequestContext) -> None:
    """Reject callers without administrative privilege.

    A missing identity, an unset admin flag and an explicit False flag are
    all rejected the same way.

    Raises:
        AuthorizationDenied: Unless ``ctx.identity.is_admin is True``.
    """
    if ctx.identity is None or ctx.identity.is_admin is not True:
        caller = ctx.identity.caller_id if ctx.identity else None
        logger.info("Authorization denied for caller %s", caller)
        raise AuthorizationDenied("Administrative privilege required.")


def acquire_token(provider: TokenProvider) -> Stage:
    """Build a stage that obtains an access token from *provider*.

    Args:
        provider: Token provider to call once per request.

    Returns:
        Stage: Coroutine function storing the token on the context.
    """

    async def _acquire_token(ctx: RequestContext) -> None:
        try:
            token = await provider.get_token()
        except TokenAcquisitionFailed:
            raise
        except Exception as exc:
            raise TokenAcquisitionFailed("Token provider raised an error") from exc
        if not token:
            raise TokenAcquisitionFailed("Token provider returned an empty token")
        ctx.access_token = token

    return _acquire_token


class Pipeline:
    """Explicit, ordered list of stages run before a handler.

    Attributes:
        stages: Stages in execution order.
    """

    def __init__(self, stages: Sequence[Stage]) -> None:
        self.stages: tuple[Stage, ...] = tuple(stages)

    async def run(self, ctx: RequestContext, handler: Handler[T]) -> T:
        """Run every stage in order, then the handler.

        Args:
            ctx: Per-request context.
            handler: Coroutine function producing the response.

        Returns:
            Whatever the handler returns.

        Raises:
            IntervalReadsError: Raised by the first failing stage.
        """
        for stage in self.stages:
            await stage(ctx)
        return await handler(ctx)
