"""
Collection pipeline: mapping file -> ordered list of resolved entries.

For every provider instance in the mapping, placeholders in the reference
are resolved, the backend is queried, and per-entry policy (remap, severity,
redaction marker, source/sink tags) is applied. Results from all instances
are concatenated and sorted by key, descending.

Collection is all-or-nothing: the first fatal error aborts the pass and no
partial list is returned.

Usage:
    from keyward.collect import Collector
    from keyward.mappingfile import load_mapping_file
    from keyward.providers import default_registry

    collector = Collector(load_mapping_file(".keyward.yml"), default_registry())
    entries = collector.collect()
"""

from __future__ import annotations

import dataclasses
import logging

from keyward.errors import SecretNotFoundError, UnknownProviderError, UnresolvedReferenceError
from keyward.mappingfile import MappingFile, ProviderMapping
from keyward.models import DEFAULT_REDACT_WITH, EnvEntry, KeyPath, RemapKeyPath, Severity
from keyward.populate import Populate, has_unresolved
from keyward.providers.base import Provider
from keyward.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)


def sort_entries(entries: list[EnvEntry]) -> list[EnvEntry]:
    return sorted(entries, key=lambda e: e.key, reverse=True)


class Collector:
    """Resolves a MappingFile against the providers in a registry."""

    def __init__(
        self,
        mapping: MappingFile,
        registry: ProviderRegistry,
        populate: Populate | None = None,
    ):
        self.mapping = mapping
        self.registry = registry
        self.populate = populate or Populate(mapping.populate_opts())
        self._providers: dict[str, Provider] = {}

    def provider_for(self, name: str) -> tuple[ProviderMapping, Provider]:
        """Mapping and live adapter for one configured instance.

        The instance name is tried as a provider kind first, then its
        ``kind`` alias. Adapters are created once per Collector.
        """
        pm = self.mapping.providers.get(name)
        if pm is None:
            raise UnknownProviderError(name)
        if name not in self._providers:
            if name in self.registry:
                kind = name
            elif pm.kind and pm.kind in self.registry:
                kind = pm.kind
            else:
                raise UnknownProviderError(name, pm.kind)
            self._providers[name] = self.registry.create(kind, pm.options)
        return pm, self._providers[name]

    def resolve(self, kp: KeyPath, provider_name: str = "") -> KeyPath:
        resolved = self.populate.resolve_key_path(kp)
        if has_unresolved(resolved.path):
            raise UnresolvedReferenceError(resolved.path, provider_name)
        return resolved

    def collect(self) -> list[EnvEntry]:
        entries: list[EnvEntry] = []
        for name in self.mapping.providers:
            entries.extend(self._collect_one(name))
        logger.debug("Collected %d entries from %d providers", len(entries), len(self.mapping.providers))
        return sort_entries(entries)

    def collect_from_provider(self, name: str) -> list[EnvEntry]:
        return sort_entries(self._collect_one(name))

    def _collect_one(self, name: str) -> list[EnvEntry]:
        pm, provider = self.provider_for(name)
        entries: list[EnvEntry] = []
        if pm.env_sync is not None:
            entries.extend(self._collect_sync(name, pm.env_sync, provider))
        if pm.env:
            entries.extend(self._collect_named(name, pm, provider))
        logger.debug("Provider %s: %d entries", name, len(entries))
        return entries

    def _collect_sync(self, name: str, kp: KeyPath, provider: Provider) -> list[EnvEntry]:
        kp = self.resolve(kp, name)
        remaps = kp.effective_remap()
        out = []
        for ent in provider.get_mapping(kp):
            out.append(_apply_policy(ent, kp, name, remaps.get(ent.key)))
        return out

    def _collect_named(self, name: str, pm: ProviderMapping, provider: Provider) -> list[EnvEntry]:
        out = []
        for env_name, kp in pm.named_keys().items():
            kp = self.resolve(kp, name)
            try:
                ent = provider.get(kp)
            except SecretNotFoundError:
                if kp.optional:
                    logger.debug("Skipping optional %s from %s", env_name, name)
                    continue
                raise
            if not ent.found:
                if kp.optional:
                    logger.debug("Skipping optional %s from %s", env_name, name)
                    continue
                raise SecretNotFoundError(
                    f"{env_name} not found at '{kp.path}'",
                    {"provider": name, "key": env_name},
                )
            out.append(_apply_policy(ent, kp, name))
        return out


def _apply_policy(
    ent: EnvEntry, kp: KeyPath, provider_name: str, remap: RemapKeyPath | None = None
) -> EnvEntry:
    key = ent.key
    severity = kp.severity
    redact_with = kp.redact_with
    if remap is not None:
        key = remap.field or key
        severity = remap.severity or severity
        redact_with = remap.redact_with or redact_with
    return dataclasses.replace(
        ent,
        key=key,
        severity=severity or Severity.HIGH,
        redact_with=redact_with or DEFAULT_REDACT_WITH,
        provider_name=provider_name,
        source=kp.source,
        sink=kp.sink,
    )
