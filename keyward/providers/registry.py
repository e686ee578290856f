"""
Provider registry.

Maps a provider kind (``inmem``, ``dotenv``, ...) to its metadata and a
factory that builds a configured instance. A registry is an ordinary object
handed to the Collector, so tests can build one holding only fakes.

Usage:
    from keyward.providers.registry import default_registry
    registry = default_registry()
    provider = registry.create("dotenv", {"path": "~/.app.env"})
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from keyward.errors import KeywardError, UnknownProviderError
from keyward.providers.base import Provider, ProviderMeta

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[dict[str, Any]], Provider]


class ProviderRegistry:
    """Name -> (metadata, factory) table."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[ProviderMeta, ProviderFactory]] = {}

    def register(self, meta: ProviderMeta, factory: ProviderFactory) -> None:
        name = meta.name.lower()
        if name in self._entries:
            raise KeywardError(f"provider '{name}' is already registered")
        self._entries[name] = (meta, factory)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def names(self) -> list[str]:
        return sorted(self._entries)

    def meta(self, name: str) -> ProviderMeta:
        try:
            return self._entries[name.lower()][0]
        except KeyError:
            raise UnknownProviderError(name) from None

    def create(self, name: str, options: dict[str, Any] | None = None) -> Provider:
        try:
            _, factory = self._entries[name.lower()]
        except KeyError:
            raise UnknownProviderError(name) from None
        logger.debug("Creating provider %s", name)
        return factory(dict(options or {}))


def default_registry() -> ProviderRegistry:
    """A fresh registry holding every built-in adapter."""
    from keyward.providers import dotenv, hashicorp_vault, inmem, process_env

    registry = ProviderRegistry()
    for module in (inmem, dotenv, process_env, hashicorp_vault):
        registry.register(module.META, module.create)
    return registry
