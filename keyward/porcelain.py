"""
Human-readable output for the CLI.

Secret values are never printed in full; ``masked_value`` keeps at most two
leading characters.
"""

from __future__ import annotations

import sys
from typing import TextIO

from keyward.models import DiffKind, DriftedEntry, EnvEntry, KeyPath, Match

PATH_WIDTH = 30


def masked_value(value: str) -> str:
    return f"{value[:2]}*****"


def shorten(text: str, width: int = PATH_WIDTH) -> str:
    """Middle-ellipsis ``text`` down to ``width`` characters."""
    if len(text) <= width:
        return text
    keep = width - 3
    head = (keep + 1) // 2
    tail = keep // 2
    return text[:head] + "..." + (text[-tail:] if tail else "")


class Porcelain:
    """Writes CLI reports to a text stream (stdout by default)."""

    def __init__(self, out: TextIO | None = None):
        self.out = out or sys.stdout

    def _print(self, line: str = "") -> None:
        print(line, file=self.out)

    def vspace(self, size: int = 1) -> None:
        self.out.write("\n" * size)

    def print_context(self, project: str, loaded_from: str) -> None:
        self._print(f"-*- keyward: loaded variables for {project} using {loaded_from} -*-")

    def print_entries(self, entries: list[EnvEntry]) -> None:
        for e in entries:
            path = shorten(e.resolved_path)
            self._print(f"[{e.provider_name} {path}] {e.key} = {masked_value(e.value)}")

    def print_matches(self, matches: list[Match]) -> None:
        for m in sorted(matches, key=lambda m: m.path):
            e = m.entry
            self._print(
                f"[{e.severity}] {m.path} ({m.line_number},{m.match_index}): "
                f"found match for {e.provider_name}/{e.key} ({masked_value(e.value)})"
            )

    def print_match_summary(self, matches: list[Match], entries: list[EnvEntry], elapsed: float) -> None:
        self._print(f"Scanning for {len(entries)} entries: found {len(matches)} matches in {elapsed:.3f}s")

    def print_drift(self, drifts: list[DriftedEntry]) -> None:
        if not drifts:
            return
        self._print(f"Drifts detected: {len(drifts)}")
        self._print()
        for d in drifts:
            src = d.source
            head = f"{d.diff} [{src.source}] {src.provider_name} {src.key} {masked_value(src.value)}"
            if d.diff == DiffKind.CHANGED and d.target is not None:
                tgt = d.target
                self._print(f"{head} != {tgt.provider_name} {tgt.key} {masked_value(tgt.value)}")
            else:
                self._print(f"{head} ??")

    def did_put(self, kp: KeyPath, provider_name: str, sync: bool) -> None:
        if sync:
            self._print(f"Synced {provider_name} ({kp.path}): OK.")
        else:
            self._print(f"Put {kp.env} ({kp.path}) in {provider_name}: OK.")

    def no_put(self, key: str, provider_name: str) -> None:
        self._print(f"Put {key} in {provider_name}: no such key '{key}' in mapping")

    def did_delete(self, kp: KeyPath, provider_name: str) -> None:
        self._print(f"Delete {kp.env} ({kp.path}) in {provider_name}: OK.")

    def no_delete(self, key: str, provider_name: str) -> None:
        self._print(f"Delete {key} in {provider_name}: no such key '{key}' in mapping")

    def did_delete_path(self, path: str, provider_name: str) -> None:
        self._print(f"Delete mapping in path {path} in {provider_name}: OK.")
