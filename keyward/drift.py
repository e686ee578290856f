"""
Drift detection.

Two separate questions, two functions:

drift()
    Within one collection pass. Entries tagged ``source: X`` are compared
    with entries tagged ``sink: X`` holding the same key. Untagged entries
    take no part; an entry carrying both tags counts only as a source.

mirror_drift()
    Two provider instances are collected independently and compared by key
    alone. The comparison is directional: keys present only in the target
    are not reported.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable

from keyward.collect import Collector
from keyward.models import DiffKind, DriftedEntry, EnvEntry

logger = logging.getLogger(__name__)


def _tag_key(tag: str, key: str) -> str:
    return f"{tag}:{key}"


def drift(entries: Iterable[EnvEntry], provider_names: Iterable[str] | None = None) -> list[DriftedEntry]:
    names = {n for n in provider_names} if provider_names else None
    if names:
        entries = [e for e in entries if e.provider_name in names]

    sources: dict[str, EnvEntry] = {}
    sinks: dict[str, list[EnvEntry]] = defaultdict(list)
    for ent in entries:
        # source wins when both tags are set
        if ent.source:
            sources[_tag_key(ent.source, ent.key)] = ent
        elif ent.sink:
            sinks[_tag_key(ent.sink, ent.key)].append(ent)

    drifts: list[DriftedEntry] = []
    for tag_key, src in sources.items():
        candidates = sinks.get(tag_key)
        if not candidates:
            drifts.append(DriftedEntry(diff=DiffKind.MISSING, source=src))
            continue
        for sink in candidates:
            if sink.value != src.value:
                drifts.append(DriftedEntry(diff=DiffKind.CHANGED, source=src, target=sink))

    drifts.sort(key=lambda d: d.source.source)
    logger.debug("Graph drift: %d records", len(drifts))
    return drifts


def compare_entries(source: list[EnvEntry], target: list[EnvEntry]) -> list[DriftedEntry]:
    """Key-by-key comparison of two entry sets, ``source`` is the reference."""
    by_key: dict[str, EnvEntry] = {}
    for e in target:
        by_key.setdefault(e.key, e)
    drifts: list[DriftedEntry] = []
    for src in source:
        tgt = by_key.get(src.key)
        if tgt is None:
            drifts.append(DriftedEntry(diff=DiffKind.MISSING, source=src))
        elif tgt.value != src.value:
            drifts.append(DriftedEntry(diff=DiffKind.CHANGED, source=src, target=tgt))
    return drifts


def mirror_drift(collector: Collector, source: str, target: str) -> list[DriftedEntry]:
    source_entries = collector.collect_from_provider(source)
    target_entries = collector.collect_from_provider(target)
    drifts = compare_entries(source_entries, target_entries)
    logger.debug("Mirror drift %s -> %s: %d records", source, target, len(drifts))
    return drifts
