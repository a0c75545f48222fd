"""Shared pytest fixtures."""

from pathlib import Path
from typing import Any

import pytest
import yaml

from knotable.llm.registry import ProviderCatalog

CATALOG_DATA: dict[str, Any] = {
    "providers": {
        "gemini": {
            "display_name": "Google Gemini",
            "supported_models": ["gemini-2.5-flash", "gemini-1.5-pro"],
            "default_model": "gemini-2.5-flash",
            "cost_per_token": 0.000001,
        },
        "openai": {
            "display_name": "OpenAI",
            "supported_models": ["gpt-4", "gpt-3.5-turbo"],
            "default_model": "gpt-3.5-turbo",
            "cost_per_token": 0.000002,
        },
        "groq": {
            "display_name": "Groq",
            "supported_models": ["llama-3.3-70b-versatile"],
            "default_model": "llama-3.3-70b-versatile",
            "cost_per_token": 0.0000006,
        },
        "anthropic": {
            "display_name": "Anthropic Claude",
            "supported_models": ["claude-3-haiku-20240307"],
            "default_model": "claude-3-haiku-20240307",
            "cost_per_token": 0.000001,
        },
    }
}


@pytest.fixture()
def catalog() -> ProviderCatalog:
    """Four-provider catalog in configuration order gemini, openai, groq, anthropic."""
    return ProviderCatalog.model_validate(CATALOG_DATA)


@pytest.fixture()
def catalog_path(tmp_path: Path) -> Path:
    """CATALOG_DATA written to a temporary providers.yaml."""
    path = tmp_path / "providers.yaml"
    path.write_text(yaml.safe_dump(CATALOG_DATA, sort_keys=False), encoding="utf-8")
    return path
