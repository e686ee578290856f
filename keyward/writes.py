"""
Write and delete pass-through.

These commands push values into providers or remove them, using the same
mapping file to locate each key. The collection pipeline never calls them.
Adapter errors are not wrapped.
"""

from __future__ import annotations

import logging

from keyward.collect import Collector
from keyward.errors import KeywardError
from keyward.models import KeyPath
from keyward.porcelain import Porcelain

logger = logging.getLogger(__name__)


def put(
    collector: Collector,
    kvmap: dict[str, str],
    provider_names: list[str],
    sync: bool = False,
    direct_path: str = "",
    porcelain: Porcelain | None = None,
) -> None:
    """Store ``kvmap`` in each provider.

    With ``sync`` the whole map goes to the provider's ``env_sync`` path (or
    ``direct_path``) in one call. Otherwise each key is written to its own
    mapped reference; keys absent from the mapping are reported and skipped.
    """
    porcelain = porcelain or Porcelain()
    for pname in provider_names:
        pm, provider = collector.provider_for(pname)
        logger.debug("put %d keys into %s (sync=%s, path=%r)", len(kvmap), pname, sync, direct_path)

        if sync:
            kp = KeyPath(path=direct_path) if direct_path else pm.env_sync
            if kp is None:
                raise KeywardError(f"there is no env sync mapping for provider '{pname}'")
            resolved = collector.resolve(kp, pname)
            provider.put_mapping(resolved, kvmap)
            porcelain.did_put(resolved, pname, sync=True)
            continue

        if pm.env is None and not direct_path:
            raise KeywardError(f"there is no specific key mapping to map to for provider '{pname}'")
        for key in sorted(kvmap):
            kp = KeyPath(path=direct_path) if direct_path else pm.env.get(key)
            if kp is None:
                porcelain.no_put(key, pname)
                continue
            resolved = collector.resolve(kp.with_env(key), pname)
            provider.put(resolved, kvmap[key])
            porcelain.did_put(resolved, pname, sync=False)


def sync(
    collector: Collector,
    source: str,
    targets: list[str],
    sync: bool = False,
    porcelain: Porcelain | None = None,
) -> None:
    """Copy every entry collected from ``source`` into ``targets``."""
    entries = collector.collect_from_provider(source)
    kvmap = {e.key: e.value for e in entries}
    put(collector, kvmap, targets, sync=sync, porcelain=porcelain)


def delete(
    collector: Collector,
    keys: list[str],
    provider_names: list[str],
    direct_path: str = "",
    all_keys: bool = False,
    porcelain: Porcelain | None = None,
) -> None:
    if not provider_names:
        raise KeywardError("at least one provider has to be specified")
    if not keys and not (all_keys and direct_path):
        raise KeywardError("at least one key is expected")

    porcelain = porcelain or Porcelain()
    for pname in provider_names:
        pm, provider = collector.provider_for(pname)
        logger.debug("delete %d keys from %s (all=%s, path=%r)", len(keys), pname, all_keys, direct_path)

        if all_keys and direct_path:
            provider.delete_mapping(collector.resolve(KeyPath(path=direct_path), pname))
            porcelain.did_delete_path(direct_path, pname)
            continue

        if pm.env is None and not direct_path:
            raise KeywardError(f"there is no specific key mapping to map to for provider '{pname}'")
        for key in keys:
            kp = KeyPath(path=direct_path) if direct_path else pm.env.get(key)
            if kp is None:
                porcelain.no_delete(key, pname)
                continue
            resolved = collector.resolve(kp.with_env(key), pname)
            provider.delete(resolved)
            porcelain.did_delete(resolved, pname)
