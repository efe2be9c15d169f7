"""
FastAPI application entry point for the interval reads API.

Loads and validates settings at startup, configures JSON logging, builds
the BearerAuth identity resolver and the energy-data token provider on
app.state, and maps pipeline errors to HTTP responses.

CHANGELOG:
- 2026-10-15: Map StoreQueryFailed to 502 with diagnostic context (STORY-006)
- 2026-10-14: Build HttpTokenProvider at startup (STORY-005)
- 2026-10-13: Register interval reads router (STORY-004)
- 2026-10-12: Initial creation (STORY-001)
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from meter_reads.api.health import router as health_router
from meter_reads.api.interval_reads import router as interval_reads_router
from meter_reads.auth.bearer import BearerAuth, parse_api_tokens
from meter_reads.clients.token_provider import HttpTokenProvider
from meter_reads.config import get_settings
from meter_reads.db.session import dispose_engine
from meter_reads.errors import (
    AuthorizationDenied,
    StoreQueryFailed,
    TokenAcquisitionFailed,
)
from meter_reads.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup validation and shutdown cleanup.

    Startup:
        - Loads and validates Settings from the environment.
        - Configures structured logging.
        - Parses API_TOKENS into a BearerAuth on app.state.
        - Builds the token provider on app.state.

    Shutdown:
        - Disposes the database engine.
    """
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    token_map = parse_api_tokens(settings.API_TOKENS)
    if not token_map:
        raise RuntimeError(
            "API_TOKENS parsed but contains no valid token:caller_id entries"
        )
    app.state.auth = BearerAuth(token_map)
    logger.info("Parsed %d API token(s) from API_TOKENS", len(token_map))

    app.state.token_provider = HttpTokenProvider(
        token_url=settings.TOKEN_URL,
        client_id=settings.TOKEN_CLIENT_ID,
        client_secret=settings.TOKEN_CLIENT_SECRET,
        timeout_s=settings.TOKEN_TIMEOUT_S,
    )

    logger.info("Settings validated, interval reads API ready")
    yield
    await dispose_engine()
    logger.info("Interval reads API shutting down")


app = FastAPI(
    title="Meter Interval Reads API",
    description="Hourly energy-meter interval readings over a trailing year.",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(interval_reads_router)


@app.exception_handler(AuthorizationDenied)
async def authorization_denied_handler(
    request: Request, exc: AuthorizationDenied,
) -> JSONResponse:
    """Map AuthorizationDenied to 403."""
    return JSONResponse(status_code=403, content={"detail": str(exc)})


@app.exception_handler(TokenAcquisitionFailed)
async def token_acquisition_failed_handler(
    request: Request, exc: TokenAcquisitionFailed,
) -> JSONResponse:
    """Map TokenAcquisitionFailed to 500 without leaking issuer details."""
    logger.error("Token acquisition failed: %s", exc, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Token acquisition failed."},
    )


@app.exception_handler(StoreQueryFailed)
async def store_query_failed_handler(
    request: Request, exc: StoreQueryFailed,
) -> JSONResponse:
    """Map StoreQueryFailed to 502 with meter and anchor context."""
    return JSONResponse(
        status_code=502,
        content={
            "detail": str(exc),
            "meter_id": exc.meter_id,
            "anchor_date": exc.anchor_date,
        },
    )


@app.get("/")
async def root() -> dict:
    """Root health check endpoint.

    Returns:
        dict: JSON object with application status.
    """
    return {"status": "ok"}
