"""Tests for application configuration."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from knotable.config import Environment, Settings, get_settings


class TestSettings:
    """Test Settings model validation and computed fields."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Settings loads with all defaults (no env vars needed)."""
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        monkeypatch.delenv("PROVIDER_PRIORITY", raising=False)
        s = Settings(_env_file=None)
        assert s.environment == Environment.DEVELOPMENT
        assert s.is_dev is True
        assert s.is_prod is False
        assert s.provider_priority == ["groq", "gemini", "openai", "anthropic"]
        assert s.llm_timeout_seconds == 60.0
        assert s.provider_catalog_path == Path("config/providers.yaml")

    def test_secret_str_not_exposed(self) -> None:
        """API keys are not exposed in repr or string conversion."""
        s = Settings(
            gemini_api_key="super-secret-key",  # type: ignore[arg-type]
            _env_file=None,
        )
        repr_str = repr(s)
        assert "super-secret-key" not in repr_str
        assert s.gemini_api_key is not None
        assert s.gemini_api_key.get_secret_value() == "super-secret-key"

    def test_api_keys_optional(self) -> None:
        """All API keys are optional."""
        s = Settings(
            _env_file=None,
            gemini_api_key=None,
            openai_api_key=None,
            groq_api_key=None,
            anthropic_api_key=None,
        )
        assert s.gemini_api_key is None
        assert s.anthropic_api_key is None
        assert s.openai_api_key is None
        assert s.groq_api_key is None

    def test_kill_switch_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """DISABLE_<NAME> flags are read from the environment."""
        monkeypatch.setenv("DISABLE_GEMINI", "true")
        s = Settings(_env_file=None)
        assert s.disable_gemini is True

    def test_priority_from_env_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """List settings are parsed from JSON env values."""
        monkeypatch.setenv("PROVIDER_PRIORITY", '["anthropic", "groq"]')
        s = Settings(_env_file=None)
        assert s.provider_priority == ["anthropic", "groq"]

    def test_groq_base_url_default(self) -> None:
        """Groq is reached through its OpenAI-compatible endpoint."""
        s = Settings(_env_file=None)
        assert s.groq_base_url == "https://api.groq.com/openai/v1"

    def test_environment_enum(self) -> None:
        """Environment accepts valid values."""
        s = Settings(environment="production", _env_file=None)  # type: ignore[arg-type]
        assert s.is_prod is True
        assert s.is_dev is False

    def test_invalid_environment(self) -> None:
        """Invalid environment value raises ValidationError."""
        with pytest.raises(ValidationError):
            Settings(environment="invalid", _env_file=None)  # type: ignore[arg-type]

    def test_invalid_timeout(self) -> None:
        """Non-numeric timeout raises ValidationError."""
        with pytest.raises(ValidationError):
            Settings(llm_timeout_seconds="soon", _env_file=None)  # type: ignore[arg-type]

    def test_testing_environment(self) -> None:
        """Testing environment flag works."""
        s = Settings(environment="testing", _env_file=None)  # type: ignore[arg-type]
        assert s.is_testing is True

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()
