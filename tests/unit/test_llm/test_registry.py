"""Tests for the provider catalog and ProviderRegistry."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from knotable.llm.errors import UnknownProviderError
from knotable.llm.registry import (
    CatalogEntry,
    ProviderCatalog,
    ProviderDescriptor,
    ProviderRegistry,
    load_catalog,
)

ALL_ON = {"gemini": True, "openai": True, "groq": True, "anthropic": True}


class TestLoadCatalog:
    def test_loads_bundled_catalog(self) -> None:
        catalog = load_catalog(Path("config/providers.yaml"))
        assert list(catalog.providers) == ["gemini", "openai", "groq", "anthropic"]
        assert catalog.providers["groq"].default_model == "llama-3.3-70b-versatile"

    def test_loads_from_file(self, catalog_path: Path) -> None:
        catalog = load_catalog(catalog_path)
        assert catalog.providers["openai"].display_name == "OpenAI"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_catalog(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("providers: [unclosed", encoding="utf-8")
        with pytest.raises(ValueError, match="Failed to parse"):
            load_catalog(path)

    def test_empty_catalog_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ProviderCatalog.model_validate({"providers": {}})

    def test_default_model_must_be_supported(self) -> None:
        with pytest.raises(ValidationError, match="not listed"):
            CatalogEntry(
                display_name="X",
                supported_models=["a"],
                default_model="b",
                cost_per_token=0.0,
            )

    def test_negative_cost_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CatalogEntry(
                display_name="X",
                supported_models=["a"],
                default_model="a",
                cost_per_token=-1,
            )


class TestProviderRegistry:
    def test_from_catalog_keeps_configuration_order(
        self, catalog: ProviderCatalog
    ) -> None:
        registry = ProviderRegistry.from_catalog(catalog, ALL_ON)
        assert registry.names == ["gemini", "openai", "groq", "anthropic"]
        assert [d.name for d in registry.list_enabled_providers()] == registry.names

    def test_missing_flag_means_disabled(self, catalog: ProviderCatalog) -> None:
        registry = ProviderRegistry.from_catalog(catalog, {"groq": True})
        assert [d.name for d in registry.list_enabled_providers()] == ["groq"]
        assert registry.describe("gemini").is_enabled is False

    def test_describe_returns_descriptor(self, catalog: ProviderCatalog) -> None:
        registry = ProviderRegistry.from_catalog(catalog, ALL_ON)
        d = registry.describe("anthropic")
        assert d.display_name == "Anthropic Claude"
        assert d.default_model == "claude-3-haiku-20240307"
        assert d.supported_models == ("claude-3-haiku-20240307",)

    def test_describe_unknown(self, catalog: ProviderCatalog) -> None:
        registry = ProviderRegistry.from_catalog(catalog, ALL_ON)
        with pytest.raises(UnknownProviderError) as exc_info:
            registry.describe("mistral")
        assert exc_info.value.known == registry.names

    def test_overrides_hide_enabled_provider(self, catalog: ProviderCatalog) -> None:
        registry = ProviderRegistry.from_catalog(catalog, ALL_ON)
        enabled = registry.list_enabled_providers({"openai": True, "groq": False})
        assert [d.name for d in enabled] == ["gemini", "groq", "anthropic"]

    def test_overrides_never_enable(self, catalog: ProviderCatalog) -> None:
        registry = ProviderRegistry.from_catalog(catalog, {"gemini": True})
        enabled = registry.list_enabled_providers({"openai": False})
        assert [d.name for d in enabled] == ["gemini"]

    def test_duplicate_names_rejected(self) -> None:
        d = ProviderDescriptor(
            name="gemini",
            display_name="Gemini",
            supported_models=("m",),
            default_model="m",
            cost_per_token=0.0,
            is_enabled=True,
        )
        with pytest.raises(ValueError, match="Duplicate"):
            ProviderRegistry([d, d])

    def test_descriptor_is_frozen(self, catalog: ProviderCatalog) -> None:
        d = ProviderRegistry.from_catalog(catalog, ALL_ON).describe("gemini")
        with pytest.raises(ValidationError):
            d.is_enabled = False  # type: ignore[misc]

    def test_estimate_cost(self, catalog: ProviderCatalog) -> None:
        d = ProviderRegistry.from_catalog(catalog, ALL_ON).describe("openai")
        assert d.estimate_cost(1000) == pytest.approx(0.002)
