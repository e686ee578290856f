"""
Scan files for secret values left in clear text.

Walks a file or directory tree (``.git`` is skipped) and reports every line
that contains a known value. Binary files, recognised by a NUL byte, are
skipped from that point on. Entries with severity ``none`` are not looked
for.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from keyward.config import DEFAULT_MAX_LINE_BYTES
from keyward.models import EnvEntry, Match, Severity

logger = logging.getLogger(__name__)

SKIP_DIRS = {".git"}


def _iter_files(root: Path) -> Iterator[Path]:
    if root.is_file():
        yield root
        return
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in SKIP_DIRS)
        for name in sorted(filenames):
            yield Path(dirpath) / name


def scan_file(path: Path, entries: list[EnvEntry], max_line_bytes: int = DEFAULT_MAX_LINE_BYTES) -> list[Match]:
    matches: list[Match] = []
    try:
        with open(path, "rb") as f:
            for lineno, raw in enumerate(f, start=1):
                if b"\x00" in raw:
                    logger.debug("Skipping binary file %s", path)
                    break
                if len(raw) > max_line_bytes:
                    logger.debug("Skipping %s: line %d too long", path, lineno)
                    break
                line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
                for ent in entries:
                    idx = line.find(ent.value)
                    if idx != -1:
                        matches.append(
                            Match(path=str(path), line=line, line_number=lineno, match_index=idx, entry=ent)
                        )
    except OSError as e:
        logger.debug("Skipping unreadable %s: %s", path, e)
    return matches


def scan(
    path: str | Path,
    entries: list[EnvEntry],
    max_line_bytes: int = DEFAULT_MAX_LINE_BYTES,
) -> list[Match]:
    """Every occurrence (one per entry per line) of a secret under ``path``."""
    wanted = [e for e in entries if e.found and e.value and e.severity != Severity.NONE]
    matches: list[Match] = []
    if not wanted:
        return matches
    for file in _iter_files(Path(path)):
        matches.extend(scan_file(file, wanted, max_line_bytes))
    logger.debug("Scan of %s: %d matches", path, len(matches))
    return matches
