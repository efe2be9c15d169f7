"""
Tests for environment-driven Settings validation (STORY-001).

CHANGELOG:
- 2026-10-14: Add LOG_LEVEL default test (STORY-007)
- 2026-10-12: Initial creation (STORY-001)

TODO:
- None
"""

import pytest
from pydantic import ValidationError

from meter_reads.config import Settings, get_settings


class TestSettings:
    """Settings loaded from the test environment."""

    def test_loads_from_environment(self) -> None:
        """Required values come from environment variables."""
        settings = get_settings()
        assert settings.TOKEN_CLIENT_ID == "meter-reads"
        assert settings.TOKEN_URL.startswith("https://")

    def test_defaults(self) -> None:
        """Optional values have defaults."""
        settings = Settings(_env_file=None)
        assert settings.TOKEN_TIMEOUT_S == 10.0
        assert settings.LOG_LEVEL == "INFO"

    def test_get_settings_is_cached(self) -> None:
        """get_settings returns the same instance until cleared."""
        assert get_settings() is get_settings()

    def test_missing_required_value_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A missing DATABASE_URL fails validation."""
        monkeypatch.delenv("DATABASE_URL")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestValidators:
    """Field validators."""

    def test_http_token_url_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """TOKEN_URL must use HTTPS."""
        monkeypatch.setenv("TOKEN_URL", "http://auth.example.com/token")
        with pytest.raises(ValidationError, match="HTTPS"):
            Settings(_env_file=None)

    @pytest.mark.parametrize("value", ["0", "-1.5"])
    def test_non_positive_timeout_rejected(
        self, monkeypatch: pytest.MonkeyPatch, value: str,
    ) -> None:
        """TOKEN_TIMEOUT_S must be positive."""
        monkeypatch.setenv("TOKEN_TIMEOUT_S", value)
        with pytest.raises(ValidationError, match="TOKEN_TIMEOUT_S"):
            Settings(_env_file=None)
