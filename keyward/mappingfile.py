"""
Declarative mapping file loader.

A mapping file names the project, the placeholder options, and one entry per
provider instance. Each instance either syncs a whole namespace (``env_sync``)
or picks named keys (``env``)::

    project: billing
    opts:
      stage: env:STAGE,dev
    providers:
      vault_prod:
        kind: hashicorp_vault
        env_sync:
          path: secret/data/{{stage}}/billing
      dotfile:
        kind: dotenv
        options:
          path: ~/.billing.env
        env:
          MG_KEY:
            path: ~/.billing.env
            optional: true
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from keyward.errors import MappingFileError
from keyward.models import KeyPath

logger = logging.getLogger(__name__)


class ProviderMapping(BaseModel):
    """One configured provider instance."""

    model_config = ConfigDict(extra="forbid")

    kind: str = ""
    env_sync: KeyPath | None = None
    env: dict[str, KeyPath] | None = None
    options: dict[str, Any] = Field(default_factory=dict)

    def named_keys(self) -> dict[str, KeyPath]:
        """Named references with the mapping key injected as ``env``."""
        return {name: kp.with_env(name) for name, kp in (self.env or {}).items()}


class MappingFile(BaseModel):
    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)

    project: str = ""
    opts: dict[str, str] = Field(default_factory=dict)
    carry_env: bool = False
    providers: dict[str, ProviderMapping] = Field(default_factory=dict)
    loaded_from: str = Field(default="", exclude=True)

    def populate_opts(self) -> dict[str, str]:
        """Placeholder options: ``project`` first, user ``opts`` override it."""
        opts = {"project": self.project} if self.project else {}
        opts.update(self.opts)
        return opts


def parse_mapping(data: Any, source: str = "<memory>") -> MappingFile:
    """Validate an already-parsed YAML document."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MappingFileError(f"{source}: top level must be a mapping", {"file": source})
    try:
        mapping = MappingFile.model_validate(data)
    except ValidationError as e:
        raise MappingFileError(
            f"{source}: invalid mapping file",
            {"file": source, "errors": e.error_count()},
        ) from e
    mapping.loaded_from = source
    return mapping


def load_mapping_file(path: str | Path) -> MappingFile:
    """Read and validate a mapping file from disk."""
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise MappingFileError(f"{path}: file not found", {"file": str(path)}) from e
    except OSError as e:
        raise MappingFileError(f"{path}: {e.strerror}", {"file": str(path)}) from e
    except yaml.YAMLError as e:
        raise MappingFileError(f"{path}: YAML syntax error", {"file": str(path)}) from e

    mapping = parse_mapping(data, str(path))
    logger.debug("Loaded mapping %s with %d providers", path, len(mapping.providers))
    return mapping
