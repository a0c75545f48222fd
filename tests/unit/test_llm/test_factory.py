"""Tests for enabled-flag derivation, adapter factory and router assembly."""

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

from knotable.config import Settings
from knotable.llm.factory import build_registry, create_providers, derive_enabled_flags
from knotable.llm.providers.anthropic import AnthropicProvider
from knotable.llm.providers.gemini import GeminiProvider
from knotable.llm.providers.openai_compat import OpenAICompatProvider
from knotable.llm.registry import ProviderCatalog
from knotable.llm.setup import create_provider_router


def _settings(**overrides: Any) -> Settings:
    """Settings with every API key unset unless given."""
    values: dict[str, Any] = {
        "gemini_api_key": None,
        "openai_api_key": None,
        "groq_api_key": None,
        "anthropic_api_key": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)  # type: ignore[call-arg]


class TestDeriveEnabledFlags:
    def test_no_keys_nothing_enabled(self) -> None:
        assert derive_enabled_flags(_settings()) == {
            "gemini": False,
            "openai": False,
            "groq": False,
            "anthropic": False,
        }

    def test_key_enables_provider(self) -> None:
        flags = derive_enabled_flags(_settings(groq_api_key="gsk-test"))
        assert flags["groq"] is True
        assert flags["gemini"] is False

    def test_kill_switch_wins_over_key(self) -> None:
        flags = derive_enabled_flags(
            _settings(gemini_api_key="test-key", disable_gemini=True)
        )
        assert flags["gemini"] is False

    def test_blank_key_is_not_a_key(self) -> None:
        flags = derive_enabled_flags(_settings(openai_api_key="   "))
        assert flags["openai"] is False


class TestCreateProviders:
    def test_no_keys_returns_empty(self, catalog: ProviderCatalog) -> None:
        s = _settings()
        assert create_providers(s, build_registry(s, catalog)) == {}

    def test_adapter_types(self, catalog: ProviderCatalog) -> None:
        s = _settings(
            gemini_api_key="test-key",
            openai_api_key="test-key",
            groq_api_key="test-key",
            anthropic_api_key="test-key",
        )
        providers = create_providers(s, build_registry(s, catalog))

        assert list(providers) == ["gemini", "openai", "groq", "anthropic"]
        assert isinstance(providers["gemini"], GeminiProvider)
        assert isinstance(providers["openai"], OpenAICompatProvider)
        assert isinstance(providers["groq"], OpenAICompatProvider)
        assert isinstance(providers["anthropic"], AnthropicProvider)

    def test_groq_uses_openai_compat(self, catalog: ProviderCatalog) -> None:
        s = _settings(groq_api_key="test-key")
        providers = create_providers(s, build_registry(s, catalog))
        assert providers["groq"].provider_name == "groq"
        assert providers["groq"].default_model == "llama-3.3-70b-versatile"

    def test_disabled_provider_not_built(self, catalog: ProviderCatalog) -> None:
        s = _settings(gemini_api_key="test-key", disable_gemini=True)
        assert create_providers(s, build_registry(s, catalog)) == {}


class TestCreateProviderRouter:
    def test_assembles_from_catalog(self, catalog: ProviderCatalog) -> None:
        s = _settings(gemini_api_key="test-key", provider_priority=["gemini"])
        router = create_provider_router(s, catalog)

        assert router.available_providers() == ["gemini"]
        assert router.priority == ("gemini",)
        assert router.registry.names == ["gemini", "openai", "groq", "anthropic"]

    def test_reads_catalog_path_when_not_given(self, catalog_path: Path) -> None:
        s = _settings(provider_catalog_path=catalog_path)
        router = create_provider_router(s)
        assert router.available_providers() == []

    @patch("knotable.llm.setup.create_providers")
    @patch("knotable.llm.setup.load_catalog")
    def test_uses_settings_catalog_path(
        self,
        mock_load: MagicMock,
        mock_providers: MagicMock,
        catalog: ProviderCatalog,
    ) -> None:
        mock_load.return_value = catalog
        mock_providers.return_value = {}
        s = _settings()

        create_provider_router(s)

        mock_load.assert_called_once_with(s.provider_catalog_path)
        mock_providers.assert_called_once()
