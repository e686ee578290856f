"""
Data models for Keyward.

References (KeyPath) come straight out of the YAML mapping file, so they are
pydantic models and get validated on load. Everything produced at runtime
(resolved entries, drift records, scan matches) is a plain dataclass.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

DEFAULT_REDACT_WITH = "**REDACTED**"


class Severity(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


class DiffKind(StrEnum):
    MISSING = "missing"
    CHANGED = "changed"


class RemapKeyPath(BaseModel):
    """Per-key override applied to namespace-sync results."""

    model_config = ConfigDict(extra="forbid")

    field: str = ""  # new key name; empty keeps the backend key
    severity: Severity | None = None
    redact_with: str = ""


class KeyPath(BaseModel):
    """Address of one secret (or one namespace) inside one backend."""

    model_config = ConfigDict(extra="forbid")

    env: str = ""  # placeholder name; filled from the mapping key for named entries
    path: str
    field: str = ""
    remap: dict[str, str] | None = None
    remap_with: dict[str, RemapKeyPath] | None = None
    decrypt: bool = False
    optional: bool = False
    severity: Severity | None = None
    redact_with: str = ""
    source: str = ""
    sink: str = ""

    @property
    def effective_key(self) -> str:
        """The key to read inside a compound secret: ``field`` wins over ``env``."""
        return self.field or self.env

    def effective_remap(self) -> dict[str, RemapKeyPath]:
        """Fold ``remap`` and ``remap_with`` into one lookup table.

        A plain ``remap`` takes precedence when both are present.
        """
        if self.remap is not None:
            return {k: RemapKeyPath(field=v) for k, v in self.remap.items()}
        if self.remap_with is not None:
            return dict(self.remap_with)
        return {}

    def with_env(self, env: str) -> KeyPath:
        return self.model_copy(update={"env": env})

    def switch_path(self, path: str) -> KeyPath:
        return self.model_copy(update={"path": path})

    def missing(self) -> EnvEntry:
        return EnvEntry(key=self.env, field=self.field, resolved_path=self.path, found=False)

    def found(self, value: str) -> EnvEntry:
        return self.found_with_key(self.env, value)

    def found_with_key(self, key: str, value: str) -> EnvEntry:
        return EnvEntry(
            key=key,
            field=self.field,
            value=value,
            resolved_path=self.path,
            found=True,
        )


@dataclass
class EnvEntry:
    """Outcome of evaluating one KeyPath against a backend."""

    key: str
    field: str = ""
    value: str = ""
    provider_name: str = ""
    resolved_path: str = ""
    severity: Severity = Severity.HIGH
    redact_with: str = DEFAULT_REDACT_WITH
    source: str = ""
    sink: str = ""
    found: bool = True

    def __post_init__(self) -> None:
        if not self.found:
            self.value = ""

    def addressing_key_path(self) -> KeyPath:
        """A KeyPath that points back at where this entry was read from."""
        return KeyPath(env=self.key, field=self.field, path=self.resolved_path)


@dataclass
class DriftedEntry:
    """An inconsistency between a source entry and its expected counterpart."""

    diff: DiffKind
    source: EnvEntry
    target: EnvEntry | None = None


@dataclass
class Match:
    """A secret value found in clear text while scanning files."""

    path: str
    line: str
    line_number: int
    match_index: int
    entry: EnvEntry
