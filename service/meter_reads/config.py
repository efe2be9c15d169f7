"""
Service configuration from environment variables using Pydantic BaseSettings.

All configuration values are loaded from environment variables (or a .env
file) at startup. No hardcoded URLs or credentials.

CHANGELOG:
- 2026-10-14: Add LOG_LEVEL (STORY-007)
- 2026-10-12: Initial creation (STORY-001)

TODO:
- None
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Interval reads API settings loaded from environment variables.

    Attributes:
        DATABASE_URL: PostgreSQL connection string (asyncpg).
        REDIS_URL: Redis connection string for the access-token cache.
        API_TOKENS: Comma-separated token:caller_id[:admin] entries.
        TOKEN_URL: Energy-data token issuer endpoint (HTTPS only).
        TOKEN_CLIENT_ID: OAuth2 client id for the token issuer.
        TOKEN_CLIENT_SECRET: OAuth2 client secret for the token issuer.
        TOKEN_TIMEOUT_S: HTTP timeout for token requests, in seconds.
        LOG_LEVEL: Root logger level name.
    """

    DATABASE_URL: str
    REDIS_URL: str
    API_TOKENS: str
    TOKEN_URL: str
    TOKEN_CLIENT_ID: str
    TOKEN_CLIENT_SECRET: str
    TOKEN_TIMEOUT_S: float = 10.0
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @field_validator("TOKEN_URL")
    @classmethod
    def token_url_must_be_https(cls, v: str) -> str:
        """Reject token issuer URLs that do not use HTTPS."""
        if not v.lower().startswith("https://"):
            raise ValueError(f"TOKEN_URL must use HTTPS (got: '{v[:20]}...').")
        return v

    @field_validator("TOKEN_TIMEOUT_S")
    @classmethod
    def token_timeout_must_be_positive(cls, v: float) -> float:
        """Validate the token request timeout is positive."""
        if v <= 0:
            raise ValueError("TOKEN_TIMEOUT_S must be > 0")
        return v


@lru_cache
def get_settings() -> Settings:
    """Create and return the process-wide Settings instance.

    Returns:
        Settings: Validated configuration from environment variables.
    """
    return Settings()
