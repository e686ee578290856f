"""Read-only provider over the current process environment."""

from __future__ import annotations

import os
from typing import Any

from keyward.models import EnvEntry, KeyPath
from keyward.providers.base import OP_READ, OP_READ_MAPPING, Provider, ProviderMeta

META = ProviderMeta(
    name="process_env",
    description="Environment of the running keyward process",
    authentication="none",
    ops=(OP_READ, OP_READ_MAPPING),
)


class ProcessEnvProvider(Provider):
    """``get`` reads ``kp.effective_key``; the path is only a label."""

    name = "process_env"

    def __init__(self, environ: dict[str, str] | None = None):
        self._environ = environ

    @property
    def environ(self) -> dict[str, str]:
        return dict(os.environ) if self._environ is None else self._environ

    def get(self, kp: KeyPath) -> EnvEntry:
        env = self.environ
        key = kp.effective_key
        if key not in env:
            return kp.missing()
        return kp.found(env[key])

    def get_mapping(self, kp: KeyPath) -> list[EnvEntry]:
        env = self.environ
        return [kp.found_with_key(k, env[k]) for k in sorted(env)]


def create(options: dict[str, Any]) -> ProcessEnvProvider:
    return ProcessEnvProvider(options.get("environ"))
