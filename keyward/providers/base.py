"""
Provider contract.

Every backend adapter subclasses Provider and overrides the operations it
supports. Anything left alone raises UnsupportedOperationError, so callers
learn about a missing capability immediately instead of getting empty data.

Lookup semantics:
    get()          -> EnvEntry; ``found=False`` when the key is absent
    get_mapping()  -> every entry beneath ``kp.path``

Adapters raise BackendUnavailableError for connectivity, permission and
malformed-response failures. They never retry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from keyward.errors import UnsupportedOperationError
from keyward.models import EnvEntry, KeyPath

OP_READ = "read"
OP_READ_MAPPING = "read_mapping"
OP_WRITE = "write"
OP_WRITE_MAPPING = "write_mapping"
OP_DELETE = "delete"
OP_DELETE_MAPPING = "delete_mapping"


@dataclass(frozen=True)
class ProviderMeta:
    """Static description of an adapter, shown by ``keyward providers``."""

    name: str
    description: str = ""
    authentication: str = ""
    ops: tuple[str, ...] = field(default_factory=tuple)


class Provider(ABC):
    """Base class for backend adapters."""

    name: str = "provider"

    @abstractmethod
    def get(self, kp: KeyPath) -> EnvEntry:
        """Look up one value."""

    def get_mapping(self, kp: KeyPath) -> list[EnvEntry]:
        raise UnsupportedOperationError(self.name, "get_mapping")

    def put(self, kp: KeyPath, value: str) -> None:
        raise UnsupportedOperationError(self.name, "put")

    def put_mapping(self, kp: KeyPath, values: dict[str, str]) -> None:
        raise UnsupportedOperationError(self.name, "put_mapping")

    def delete(self, kp: KeyPath) -> None:
        raise UnsupportedOperationError(self.name, "delete")

    def delete_mapping(self, kp: KeyPath) -> None:
        raise UnsupportedOperationError(self.name, "delete_mapping")
