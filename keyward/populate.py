"""
Placeholder resolution for mapping file paths.

``{{name}}`` tokens are replaced from a fixed option map. An option whose
value starts with ``env:`` is read from the process environment instead,
optionally with a default after the first comma::

    opts:
      stage: prod
      region: env:AWS_REGION,us-east-1

Unknown placeholders are left in place; a later stage (or the collector's
unresolved-reference check) decides what to do with them.
"""

from __future__ import annotations

import os
import re

from keyward.models import KeyPath

FROM_ENVIRONMENT = "env:"
DEFAULT_SEPARATOR = ","

_PLACEHOLDER_RE = re.compile(r"\{\{[^{}]*\}\}")


def parse_default_value(spec: str) -> tuple[str, str]:
    """Split ``VAR,default`` into ``("VAR", "default")``.

    Only the first separator counts, so the default may itself contain commas.
    """
    if DEFAULT_SEPARATOR in spec:
        name, default = spec.split(DEFAULT_SEPARATOR, 1)
        return name, default.strip()
    return spec, ""


def has_unresolved(text: str) -> bool:
    """True if ``text`` still contains a ``{{...}}`` token."""
    return _PLACEHOLDER_RE.search(text) is not None


class Populate:
    """Expands ``{{name}}`` placeholders against an option map."""

    def __init__(self, opts: dict[str, str] | None = None):
        self.opts: dict[str, str] = dict(opts or {})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Populate):
            return NotImplemented
        return self.opts == other.opts

    def _value_for(self, raw: str) -> str:
        if not raw.startswith(FROM_ENVIRONMENT):
            return raw
        name, default = parse_default_value(raw[len(FROM_ENVIRONMENT):])
        return os.environ.get(name) or default

    def resolve(self, template: str) -> str:
        populated = template
        for name, raw in self.opts.items():
            populated = populated.replace(f"{{{{{name}}}}}", self._value_for(raw))
        return populated

    def resolve_key_path(self, kp: KeyPath) -> KeyPath:
        """Copy of ``kp`` with only its path resolved."""
        return kp.switch_path(self.resolve(kp.path))
