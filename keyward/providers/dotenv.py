"""
Dotenv file provider, backed by python-dotenv.

``kp.path`` is the file (``~`` is expanded). A named lookup reads
``kp.effective_key`` from it; a namespace sync returns every key in the file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values, set_key, unset_key

from keyward.errors import BackendUnavailableError
from keyward.models import EnvEntry, KeyPath
from keyward.providers.base import (
    OP_DELETE,
    OP_READ,
    OP_READ_MAPPING,
    OP_WRITE,
    OP_WRITE_MAPPING,
    Provider,
    ProviderMeta,
)

logger = logging.getLogger(__name__)

META = ProviderMeta(
    name="dotenv",
    description=".env files on the local filesystem",
    authentication="filesystem permissions",
    ops=(OP_READ, OP_READ_MAPPING, OP_WRITE, OP_WRITE_MAPPING, OP_DELETE),
)


class DotenvProvider(Provider):
    name = "dotenv"

    def _path(self, kp: KeyPath) -> Path:
        return Path(os.path.expanduser(kp.path))

    def _read(self, kp: KeyPath) -> dict[str, str]:
        path = self._path(kp)
        if not path.is_file():
            raise BackendUnavailableError(f"dotenv file not found: {path}", {"path": str(path)})
        try:
            values = dotenv_values(path)
        except OSError as e:
            raise BackendUnavailableError(f"cannot read {path}: {e.strerror}") from e
        return {k: v or "" for k, v in values.items()}

    def get(self, kp: KeyPath) -> EnvEntry:
        values = self._read(kp)
        key = kp.effective_key
        if key not in values:
            return kp.missing()
        return kp.found(values[key])

    def get_mapping(self, kp: KeyPath) -> list[EnvEntry]:
        values = self._read(kp)
        return [kp.found_with_key(k, values[k]) for k in sorted(values)]

    def put(self, kp: KeyPath, value: str) -> None:
        self.put_mapping(kp, {kp.effective_key: value})

    def put_mapping(self, kp: KeyPath, values: dict[str, str]) -> None:
        path = self._path(kp)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch(exist_ok=True)
            for k, v in values.items():
                set_key(path, k, v)
        except OSError as e:
            raise BackendUnavailableError(f"cannot write {path}: {e.strerror}") from e
        logger.debug("Wrote %d keys to %s", len(values), path)

    def delete(self, kp: KeyPath) -> None:
        path = self._path(kp)
        if not path.is_file():
            return
        try:
            unset_key(path, kp.effective_key)
        except OSError as e:
            raise BackendUnavailableError(f"cannot write {path}: {e.strerror}") from e


def create(options: dict[str, Any]) -> DotenvProvider:
    return DotenvProvider()
