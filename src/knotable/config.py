"""Centralized application configuration via environment variables."""

from enum import StrEnum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All LLM API keys use SecretStr to prevent accidental logging.
    A provider is enabled when its API key is set and its
    ``DISABLE_<NAME>`` flag is not true. Enabled flags are derived
    once, when the provider registry is built.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- App ---
    environment: Environment = Environment.DEVELOPMENT
    log_level: str = "DEBUG"
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    # --- CORS ---
    cors_allowed_origins: list[str] = []
    cors_allow_credentials: bool = False
    cors_allowed_methods: list[str] = ["GET", "POST", "PUT"]
    cors_allowed_headers: list[str] = ["Content-Type"]

    # --- LLM API Keys ---
    gemini_api_key: SecretStr | None = None
    openai_api_key: SecretStr | None = None
    groq_api_key: SecretStr | None = None
    anthropic_api_key: SecretStr | None = None

    # --- Kill switches ---
    disable_gemini: bool = False
    disable_openai: bool = False
    disable_groq: bool = False
    disable_anthropic: bool = False

    # --- OpenAI-compatible endpoints ---
    # Groq serves the OpenAI wire format; OpenAI itself may be pointed at
    # a proxy or Azure deployment through openai_base_url.
    openai_base_url: str | None = None
    groq_base_url: str = "https://api.groq.com/openai/v1"

    # --- Routing ---
    # "auto" selection walks this list first (fastest/cheapest first).
    provider_priority: list[str] = Field(
        default_factory=lambda: ["groq", "gemini", "openai", "anthropic"]
    )
    llm_timeout_seconds: float = 60.0

    # --- Provider catalog ---
    provider_catalog_path: Path = Path("config/providers.yaml")

    # --- Convenience properties ---
    @property
    def is_dev(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_prod(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings singleton.

    Usage::

        from knotable.config import get_settings
        settings = get_settings()
    """
    return Settings()
