"""Tests for admin settings overrides."""

from knotable.admin_settings import (
    InMemoryAdminSettings,
    disabled_key,
    overrides_from_settings,
)


class TestOverridesFromSettings:
    def test_disabled_flags_parsed(self) -> None:
        values = {
            "gemini_disabled": "true",
            "groq_disabled": " TRUE ",
            "openai_disabled": "false",
            "anthropic_disabled": "yes",
            "ai_enabled": "true",
        }
        assert overrides_from_settings(values) == {
            "gemini": True,
            "groq": True,
            "openai": False,
            "anthropic": False,
        }

    def test_restricted_to_providers(self) -> None:
        values = {"gemini_disabled": "true", "mistral_disabled": "true"}
        assert overrides_from_settings(values, ["gemini", "groq"]) == {"gemini": True}

    def test_bare_suffix_ignored(self) -> None:
        assert overrides_from_settings({"_disabled": "true"}) == {}

    def test_disabled_key(self) -> None:
        assert disabled_key("groq") == "groq_disabled"


class TestInMemoryAdminSettings:
    async def test_set_and_read_back(self) -> None:
        store = InMemoryAdminSettings({"gemini_disabled": "true"})
        await store.set(disabled_key("groq"), "true")

        assert await store.get_all() == {
            "gemini_disabled": "true",
            "groq_disabled": "true",
        }
        assert await store.disabled_overrides() == {"gemini": True, "groq": True}

    async def test_get_all_returns_copy(self) -> None:
        store = InMemoryAdminSettings()
        values = await store.get_all()
        values["gemini_disabled"] = "true"
        assert await store.disabled_overrides() == {}
