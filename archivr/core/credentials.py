"""Credential stores consulted before any provider call."""

import os
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from archivr.config.constants import OPENROUTER_API_KEY_ENV

if TYPE_CHECKING:
    from archivr.config.settings import OpenRouterConfig


@runtime_checkable
class CredentialStore(Protocol):
    """Anything that can hand out the current API key."""

    def get(self) -> str | None:
        """Return the configured credential, or None when absent."""
        ...


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class StaticCredentialStore:
    """A fixed credential, e.g. one typed into a settings page."""

    def __init__(self, credential: str | None = None) -> None:
        self._credential = _clean(credential)

    def get(self) -> str | None:
        return self._credential

    def set(self, credential: str | None) -> None:
        self._credential = _clean(credential)

    def clear(self) -> None:
        self._credential = None


class SettingsCredentialStore:
    """Resolve the key from settings, re-read on every ``get``.

    Order: explicit ``api_key`` > env var named by ``api_key_env`` >
    ``OPENROUTER_API_KEY``.
    """

    def __init__(self, config: "OpenRouterConfig") -> None:
        self.config = config

    def get(self) -> str | None:
        api_key = _clean(self.config.api_key)
        if not api_key and self.config.api_key_env:
            api_key = _clean(os.environ.get(self.config.api_key_env))
        if not api_key:
            api_key = _clean(os.environ.get(OPENROUTER_API_KEY_ENV))
        return api_key


def has_credential(store: CredentialStore) -> bool:
    """True if ``store`` currently holds a credential."""
    return store.get() is not None
