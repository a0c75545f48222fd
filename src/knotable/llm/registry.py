"""Provider registry: static catalog plus enabled flags fixed at startup.

The catalog (display names, models, cost per token) is loaded from
config/providers.yaml and validated by Pydantic. Enabled flags are not
read here: they are passed in as an explicit mapping, derived once from
Settings by knotable.llm.factory.derive_enabled_flags(). Tests build
any enabled/disabled combination without touching the environment.
"""

from collections.abc import Mapping, Sequence
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from knotable.llm.errors import UnknownProviderError


class CatalogEntry(BaseModel):
    """Static description of one provider, as written in YAML."""

    display_name: str
    supported_models: list[str]
    default_model: str
    cost_per_token: float = Field(ge=0)

    @model_validator(mode="after")
    def default_model_is_supported(self) -> "CatalogEntry":
        if self.default_model not in self.supported_models:
            raise ValueError(
                f"default_model '{self.default_model}' is not listed "
                f"in supported_models {self.supported_models}"
            )
        return self


class ProviderCatalog(BaseModel):
    """Top-level catalog; dict order is the configuration order."""

    providers: dict[str, CatalogEntry]

    @model_validator(mode="after")
    def not_empty(self) -> "ProviderCatalog":
        if not self.providers:
            raise ValueError("Provider catalog must list at least one provider")
        return self


class ProviderDescriptor(BaseModel):
    """Immutable, process-wide description of a configured provider."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    supported_models: tuple[str, ...]
    default_model: str
    cost_per_token: float
    is_enabled: bool

    def estimate_cost(self, tokens_used: int) -> float:
        """Approximate cost in USD for the given token count."""
        return tokens_used * self.cost_per_token


class ProviderRegistry:
    """Read-only view over configured providers.

    Args:
        descriptors: Providers in configuration order. Names must be unique.
    """

    def __init__(self, descriptors: Sequence[ProviderDescriptor]) -> None:
        names = [d.name for d in descriptors]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate provider names: {duplicates}")
        self._descriptors: tuple[ProviderDescriptor, ...] = tuple(descriptors)
        self._by_name = {d.name: d for d in self._descriptors}

    @classmethod
    def from_catalog(
        cls,
        catalog: ProviderCatalog,
        enabled: Mapping[str, bool],
    ) -> "ProviderRegistry":
        """Combine the static catalog with startup enabled flags.

        Providers missing from ``enabled`` are disabled.
        """
        return cls(
            [
                ProviderDescriptor(
                    name=name,
                    display_name=entry.display_name,
                    supported_models=tuple(entry.supported_models),
                    default_model=entry.default_model,
                    cost_per_token=entry.cost_per_token,
                    is_enabled=enabled.get(name, False),
                )
                for name, entry in catalog.providers.items()
            ]
        )

    @property
    def names(self) -> list[str]:
        """All configured provider names, in configuration order."""
        return [d.name for d in self._descriptors]

    def describe(self, name: str) -> ProviderDescriptor:
        """Return the descriptor for ``name``.

        Raises:
            UnknownProviderError: if ``name`` is not configured.
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownProviderError(name, self.names) from None

    def list_enabled_providers(
        self,
        disabled_overrides: Mapping[str, bool] | None = None,
    ) -> list[ProviderDescriptor]:
        """Enabled providers in configuration order.

        Args:
            disabled_overrides: Per-request admin overrides,
                ``{name: True}`` hides an otherwise enabled provider.
                Overrides never enable a provider disabled at startup.
        """
        overrides = disabled_overrides or {}
        return [
            d
            for d in self._descriptors
            if d.is_enabled and not overrides.get(d.name, False)
        ]


def load_catalog(config_path: Path) -> ProviderCatalog:
    """Load and validate the provider catalog from YAML.

    Args:
        config_path: Path to providers.yaml. Typically comes from
            Settings.provider_catalog_path.

    Raises:
        FileNotFoundError: if YAML file doesn't exist.
        ValueError: if YAML parsing or validation fails.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Provider catalog not found: {config_path}")

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        msg = f"Failed to parse provider catalog '{config_path}': {e}"
        raise ValueError(msg) from e
    return ProviderCatalog.model_validate(raw)
