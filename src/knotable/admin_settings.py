"""Admin key/value settings consulted for per-request provider overrides.

The admin console stores flags such as ``gemini_disabled = "true"``.
Only the lookup interface lives here; a database-backed store is an
external collaborator that implements AdminSettingsStore.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Protocol

DISABLED_SUFFIX = "_disabled"


def disabled_key(provider: str) -> str:
    """Settings key holding the kill switch for ``provider``."""
    return f"{provider}{DISABLED_SUFFIX}"


def overrides_from_settings(
    values: Mapping[str, str],
    providers: Iterable[str] | None = None,
) -> dict[str, bool]:
    """Translate raw admin settings into a ``{provider: disabled}`` map.

    Args:
        values: Raw key/value settings.
        providers: Restrict the result to these provider names.
    """
    overrides: dict[str, bool] = {}
    for key, value in values.items():
        if not key.endswith(DISABLED_SUFFIX):
            continue
        name = key[: -len(DISABLED_SUFFIX)]
        if name:
            overrides[name] = value.strip().lower() == "true"
    if providers is not None:
        wanted = set(providers)
        overrides = {k: v for k, v in overrides.items() if k in wanted}
    return overrides


class AdminSettingsStore(Protocol):
    """Lookup interface for admin key/value settings."""

    async def get_all(self) -> dict[str, str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def disabled_overrides(self) -> dict[str, bool]: ...


class InMemoryAdminSettings:
    """Process-local AdminSettingsStore, used by default and in tests."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    async def get_all(self) -> dict[str, str]:
        return dict(self._values)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = value

    async def disabled_overrides(self) -> dict[str, bool]:
        return overrides_from_settings(self._values)
