"""
Health check endpoint for the interval reads API.

Provides a simple GET /health endpoint that returns {"status": "ok"} with
HTTP 200. No authentication is required; it is intended for container
health checks and internal monitoring only.

CHANGELOG:
- 2026-10-12: Initial creation (STORY-001)

TODO:
- None
"""

from fastapi import APIRouter

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Return a simple health status.

    Returns:
        dict: ``{"status": "ok"}`` indicating the service is alive.
    """
    return {"status": "ok"}
