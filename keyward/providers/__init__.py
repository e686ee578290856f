"""
Backend adapters and the registry that builds them.

Public API:
    Provider, ProviderMeta      -> adapter contract
    ProviderRegistry            -> name -> factory table
    default_registry()          -> registry holding every built-in adapter
"""

from __future__ import annotations

from keyward.providers.base import Provider, ProviderMeta
from keyward.providers.registry import ProviderRegistry, default_registry

__all__ = ["Provider", "ProviderMeta", "ProviderRegistry", "default_registry"]
