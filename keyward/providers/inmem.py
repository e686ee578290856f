"""In-memory provider. Useful for tests and for trying out a mapping file."""

from __future__ import annotations

from typing import Any

from keyward.models import EnvEntry, KeyPath
from keyward.providers.base import (
    OP_DELETE,
    OP_DELETE_MAPPING,
    OP_READ,
    OP_READ_MAPPING,
    OP_WRITE,
    OP_WRITE_MAPPING,
    Provider,
    ProviderMeta,
)

META = ProviderMeta(
    name="inmem",
    description="In-memory key/value store",
    authentication="none; seed values with options.data",
    ops=(OP_READ, OP_READ_MAPPING, OP_WRITE, OP_WRITE_MAPPING, OP_DELETE, OP_DELETE_MAPPING),
)


class InMemProvider(Provider):
    """Flat ``path -> value`` store. A namespace is every key below ``path/``."""

    name = "inmem"

    def __init__(self, data: dict[str, str] | None = None):
        self.data: dict[str, str] = {k: str(v) for k, v in (data or {}).items()}

    def _prefix(self, path: str) -> str:
        return path.rstrip("/") + "/"

    def get(self, kp: KeyPath) -> EnvEntry:
        if kp.path not in self.data:
            return kp.missing()
        return kp.found(self.data[kp.path])

    def get_mapping(self, kp: KeyPath) -> list[EnvEntry]:
        prefix = self._prefix(kp.path)
        keys = sorted((k for k in self.data if k.startswith(prefix)), reverse=True)
        return [kp.found_with_key(k, self.data[k]) for k in keys]

    def put(self, kp: KeyPath, value: str) -> None:
        self.data[kp.path] = value

    def put_mapping(self, kp: KeyPath, values: dict[str, str]) -> None:
        prefix = self._prefix(kp.path)
        for k, v in values.items():
            self.data[prefix + k] = v

    def delete(self, kp: KeyPath) -> None:
        self.data.pop(kp.path, None)

    def delete_mapping(self, kp: KeyPath) -> None:
        prefix = self._prefix(kp.path)
        for k in [k for k in self.data if k.startswith(prefix)]:
            del self.data[k]


def create(options: dict[str, Any]) -> InMemProvider:
    return InMemProvider(options.get("data"))
