"""Render collected entries as shell, dotenv, YAML or JSON text."""

from __future__ import annotations

import json

import yaml

from keyward.models import EnvEntry

FORMATS = ("env", "dotenv", "yaml", "json")


def _as_map(entries: list[EnvEntry]) -> dict[str, str]:
    return {e.key: e.value for e in entries}


def export_env(entries: list[EnvEntry]) -> str:
    """A ``sh`` script of ``export KEY='value'`` lines."""
    lines = ["#!/bin/sh"]
    for e in entries:
        value = e.value.replace("'", "'\"'\"'")
        lines.append(f"export {e.key}='{value}'")
    return "\n".join(lines) + "\n"


def export_dotenv(entries: list[EnvEntry]) -> str:
    return "".join(f"{e.key}={e.value}\n" for e in entries)


def export_yaml(entries: list[EnvEntry]) -> str:
    return yaml.safe_dump(_as_map(entries), default_flow_style=False)


def export_json(entries: list[EnvEntry]) -> str:
    return json.dumps(_as_map(entries), indent=2, sort_keys=True)


def export(entries: list[EnvEntry], fmt: str) -> str:
    renderers = {
        "env": export_env,
        "dotenv": export_dotenv,
        "yaml": export_yaml,
        "json": export_json,
    }
    try:
        return renderers[fmt](entries)
    except KeyError:
        raise ValueError(f"unknown export format: {fmt}") from None
